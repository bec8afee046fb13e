"""Error taxonomy of the password change flow.

Every error carries a user-safe ``message`` (shown on the page) and may carry
internal details that are only written to the log.
"""
from __future__ import annotations


class PortalError(Exception):
    """Base class for all password portal errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(PortalError):
    """Misdeployment: missing host context or invalid settings. Never user-facing."""


class AuthenticationError(PortalError):
    """No authenticated principal in the request."""

    def __init__(self, message: str = "you must be logged in to change the password") -> None:
        super().__init__(message)


class ValidationError(PortalError):
    """Submitted form fields are inconsistent."""

    def __init__(self, message: str = "passwords do not match") -> None:
        super().__init__(message)


class PolicyError(PortalError):
    """The proposed password is too weak.

    ``reason`` is one of :data:`TOO_SHORT` or :data:`TOO_FEW_NONALPHA`.
    """

    TOO_SHORT = "too short"
    TOO_FEW_NONALPHA = "too few non-alphabetic characters"

    def __init__(self, reason: str, message: str | None = None) -> None:
        super().__init__(message or f"password is {reason}")
        self.reason = reason


class DirectoryError(PortalError):
    """A step of the directory transaction failed.

    ``step`` is one of ``connect``, ``configure``, ``bind``, ``modify``,
    ``close``; ``detail`` is the transport message (log only).
    """

    USER_MESSAGE = "password change failed"

    def __init__(self, step: str, detail: str = "") -> None:
        super().__init__(self.USER_MESSAGE)
        self.step = step
        self.detail = detail

    def __str__(self) -> str:
        if self.detail:
            return f"{self.step}: {self.detail}"
        return self.step
