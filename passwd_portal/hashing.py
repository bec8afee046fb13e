"""Salted SHA-1 (``{SSHA}``) password hashes as understood by OpenLDAP."""
from __future__ import annotations

import base64
from dataclasses import dataclass

from passlib.hash import ldap_salted_sha1

SSHA_SCHEME = "{SSHA}"
SALT_SIZE = 4
DIGEST_SIZE = 20

_ssha = ldap_salted_sha1.using(salt_size=SALT_SIZE)


@dataclass(frozen=True)
class SaltedHash:
    """Parsed view of a ``{SSHA}`` value: base64(digest || salt)."""

    digest: bytes
    salt: bytes

    @classmethod
    def from_stored(cls, stored: str) -> "SaltedHash":
        if not stored.startswith(SSHA_SCHEME):
            raise ValueError("not an {SSHA} hash")
        raw = base64.b64decode(stored[len(SSHA_SCHEME):])
        return cls(digest=raw[:DIGEST_SIZE], salt=raw[DIGEST_SIZE:])

    @property
    def encoded(self) -> str:
        return base64.b64encode(self.digest + self.salt).decode("ascii")

    @property
    def stored(self) -> str:
        """Value for the userPassword attribute."""
        return SSHA_SCHEME + self.encoded


class CredentialHasher:
    def hash(self, password: str) -> SaltedHash:
        return SaltedHash.from_stored(_ssha.hash(password))

    def verify(self, password: str, stored: str) -> bool:
        return _ssha.verify(password, stored)
