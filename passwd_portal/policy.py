from __future__ import annotations

import string
from dataclasses import dataclass

from .errors import PolicyError


@dataclass(frozen=True)
class PasswordPolicy:
    """Strength rules for a new password. The old password is never checked."""

    minimum_length: int = 6
    minimum_nonalpha: int = 1

    def validate(self, password: str) -> None:
        if len(password) < self.minimum_length:
            raise PolicyError(
                PolicyError.TOO_SHORT,
                f"password must have at least {self.minimum_length} characters",
            )

        nonalpha = sum(1 for ch in password if ch not in string.ascii_letters)
        if nonalpha < self.minimum_nonalpha:
            raise PolicyError(
                PolicyError.TOO_FEW_NONALPHA,
                f"password must contain at least {self.minimum_nonalpha} non-alphabetical characters",
            )
