from __future__ import annotations

from functools import lru_cache

from fastapi import Request

from .config import PortalConfig
from .domain import domain_of
from .identity import IdentityContext
from .session import SESSION_COOKIE, read_session
from .use_case import ChangePasswordUseCase


@lru_cache(maxsize=1)
def get_config() -> PortalConfig:
    return PortalConfig.from_env()


def authenticated_username(request: Request, config: PortalConfig) -> str | None:
    """Username of the current user, or None.

    Sources, in order: header set by the authenticating reverse proxy (only
    when TRUSTED_USER_HEADER is configured), then the signed session cookie.
    """
    if config.trusted_user_header:
        remote_user = (request.headers.get(config.trusted_user_header) or "").strip()
        if remote_user:
            return remote_user

    token = request.cookies.get(SESSION_COOKIE, "")
    data = read_session(token) if token else None
    if not data:
        return None
    # Cookie issued for another mail domain on the same portal is not valid here.
    if data.get("domain") != domain_of(request_host(request)):
        return None
    return str(data["username"])


def request_host(request: Request) -> str | None:
    # URL.hostname drops the port and IPv6 brackets; domain_of validates the rest.
    host = request.url.hostname
    if host:
        return host
    server = request.scope.get("server")
    return server[0] if server else None


def identity_context(request: Request, config: PortalConfig, form: dict | None = None) -> IdentityContext:
    return IdentityContext(
        principal=authenticated_username(request, config),
        host=request_host(request),
        form=form or {},
    )


@lru_cache(maxsize=1)
def get_use_case() -> ChangePasswordUseCase:
    return ChangePasswordUseCase(get_config())
