from __future__ import annotations

import re

from ldap3.utils.dn import escape_rdn

from .errors import ConfigurationError

_LABEL_RE = re.compile(r"^[A-Za-z0-9-]+$")
_PORT_RE = re.compile(r"^(.*):\d+$")


def validate_domain(domain: str) -> str:
    """Every label must be a plain hostname label; nothing else may reach a DN."""
    labels = domain.split(".")
    if not all(_LABEL_RE.match(label) for label in labels):
        raise ConfigurationError(f"invalid host or domain name: {domain!r}")
    return domain


def domain_of(host: str | None) -> str:
    """Domain = the last two labels of the host name (mail.example.com -> example.com)."""
    host = (host or "").strip()
    m = _PORT_RE.match(host)
    if m:
        host = m.group(1)
    host = host.strip(".")
    if not host:
        raise ConfigurationError("host identifier is not available")
    validate_domain(host)
    return ".".join(host.split(".")[-2:])


def domain_to_dn(domain: str) -> str:
    return ",".join([f"dc={label}" for label in validate_domain(domain).split(".")])


def user_dn(username: str, domain: str, root_domain: str) -> str:
    return (
        f"uid={escape_rdn(username)},ou=people,"
        f"{domain_to_dn(domain)},ou=vmail,{domain_to_dn(root_domain)}"
    )
