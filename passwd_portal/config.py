from __future__ import annotations

from dataclasses import dataclass

from .env_settings import EnvSettings, get_env
from .domain import validate_domain
from .errors import ConfigurationError


@dataclass(frozen=True)
class DirectoryEndpoint:
    host: str = "127.0.0.1"
    port: int = 389
    use_ssl: bool = False
    starttls: bool = False
    tls_validate: bool = False
    timeout_s: float = 5.0


@dataclass(frozen=True)
class PortalConfig:
    """Read-only configuration, built once at process start."""

    root_domain: str = "example.com"
    minimum_length: int = 6
    minimum_nonalpha: int = 1
    directory: DirectoryEndpoint = DirectoryEndpoint()
    trusted_user_header: str = ""

    def __post_init__(self) -> None:
        root = (self.root_domain or "").strip().strip(".")
        if not root:
            raise ConfigurationError("root domain is not configured")
        validate_domain(root)
        object.__setattr__(self, "root_domain", root)

        if self.minimum_length < 0 or self.minimum_nonalpha < 0:
            raise ConfigurationError("password policy thresholds must not be negative")
        if not (self.directory.host or "").strip():
            raise ConfigurationError("directory host is not configured")
        if not 0 < self.directory.port < 65536:
            raise ConfigurationError(f"invalid directory port: {self.directory.port}")
        if self.directory.use_ssl and self.directory.starttls:
            raise ConfigurationError("LDAPS and StartTLS are mutually exclusive")

    @classmethod
    def from_env(cls, env: EnvSettings | None = None) -> "PortalConfig":
        env = env or get_env()
        return cls(
            root_domain=env.root_domain,
            minimum_length=env.password_min_length,
            minimum_nonalpha=env.password_min_nonalpha,
            directory=DirectoryEndpoint(
                host=env.ldap_host.strip(),
                port=env.ldap_port,
                use_ssl=env.ldap_use_ssl,
                starttls=env.ldap_starttls,
                tls_validate=env.ldap_tls_validate,
                timeout_s=env.ldap_timeout_s,
            ),
            trusted_user_header=(env.trusted_user_header or "").strip(),
        )
