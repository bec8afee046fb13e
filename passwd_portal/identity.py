from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from .domain import domain_of
from .errors import AuthenticationError, ValidationError


@dataclass(frozen=True)
class Principal:
    username: str
    domain: str


@dataclass(frozen=True)
class IdentityContext:
    """Everything the password change needs from one request.

    ``principal`` comes from the trusted request context (signed session or
    proxy header), never from the submitted form.
    """

    principal: str | None
    host: str | None
    form: Mapping[str, str] = field(default_factory=dict)

    def resolve_username(self) -> str:
        username = (self.principal or "").strip()
        if not username:
            raise AuthenticationError()
        return username

    def resolve_domain(self) -> str:
        return domain_of(self.host)

    def resolve_principal(self) -> Principal:
        return Principal(username=self.resolve_username(), domain=self.resolve_domain())

    def resolve_new_password(self) -> str:
        if "password" not in self.form:
            return ""
        password = str(self.form.get("password") or "")
        password2 = str(self.form.get("password2") or "")
        if password != password2:
            raise ValidationError()
        return password

    def resolve_old_password(self) -> str:
        return str(self.form.get("oldpassword") or "")
