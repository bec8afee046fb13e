from __future__ import annotations

from typing import Any, Dict
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from .env_settings import get_env

SESSION_COOKIE = "passwd_portal_session"
SESSION_MAX_AGE = 8 * 60 * 60


def _serializer() -> URLSafeTimedSerializer:
    s = get_env()
    return URLSafeTimedSerializer(s.secret_key, salt="passwd-portal-session")


def create_session(data: Dict[str, Any]) -> str:
    return _serializer().dumps(data)


def read_session(token: str, max_age_seconds: int = SESSION_MAX_AGE) -> Dict[str, Any] | None:
    try:
        data = _serializer().loads(token, max_age=max_age_seconds)
    except (BadSignature, SignatureExpired):
        return None
    if not isinstance(data, dict) or not data.get("username"):
        return None
    return data
