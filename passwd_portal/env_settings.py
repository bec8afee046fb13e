from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings
from pydantic import Field


class EnvSettings(BaseSettings):
    secret_key: str = Field(..., alias="APP_SECRET_KEY")
    cookie_secure: bool = Field(False, alias="APP_COOKIE_SECURE")

    # Корневой домен дерева vmail: ou=vmail,dc=example,dc=com
    root_domain: str = Field("example.com", alias="VMAIL_ROOT_DOMAIN")

    ldap_host: str = Field("127.0.0.1", alias="LDAP_HOST")
    ldap_port: int = Field(389, alias="LDAP_PORT")
    ldap_use_ssl: bool = Field(False, alias="LDAP_USE_SSL")
    ldap_starttls: bool = Field(False, alias="LDAP_STARTTLS")
    ldap_tls_validate: bool = Field(False, alias="LDAP_TLS_VALIDATE")
    ldap_timeout_s: float = Field(5.0, alias="LDAP_TIMEOUT_S")

    password_min_length: int = Field(6, alias="PASSWORD_MIN_LENGTH")
    password_min_nonalpha: int = Field(1, alias="PASSWORD_MIN_NONALPHA")

    # Заголовок, который выставляет reverse proxy после своей аутентификации
    # (аналог REMOTE_USER). Пустая строка = не доверять заголовкам.
    trusted_user_header: str = Field("", alias="TRUSTED_USER_HEADER")

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_retention_days: int = Field(30, alias="LOG_RETENTION_DAYS")

    class Config:
        populate_by_name = True


@lru_cache(maxsize=1)
def get_env() -> EnvSettings:
    return EnvSettings()
