from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import PortalConfig
from .directory import DirectorySession
from .domain import user_dn
from .errors import ConfigurationError, DirectoryError, PolicyError, PortalError
from .hashing import CredentialHasher
from .identity import IdentityContext
from .policy import PasswordPolicy

logger = logging.getLogger(__name__)

STATUS_IDLE = "idle"
STATUS_SUCCESS = "success"
STATUS_FAILURE = "failure"


@dataclass(frozen=True)
class ChangeOutcome:
    """Result of one "change my password" request.

    ``status`` is one of idle / success / failure; ``message`` is set for
    failures only and is always safe to show to the user.
    """

    status: str
    message: str = ""
    username: str = ""
    domain: str = ""

    @property
    def ok(self) -> bool:
        return self.status == STATUS_SUCCESS


class ChangePasswordUseCase:
    def __init__(
        self,
        config: PortalConfig,
        directory: DirectorySession | None = None,
        hasher: CredentialHasher | None = None,
        policy: PasswordPolicy | None = None,
    ) -> None:
        self.config = config
        self.directory = directory or DirectorySession(config.directory)
        self.hasher = hasher or CredentialHasher()
        self.policy = policy or PasswordPolicy(
            minimum_length=config.minimum_length,
            minimum_nonalpha=config.minimum_nonalpha,
        )

    def execute(self, ctx: IdentityContext) -> ChangeOutcome:
        """Run the change. ConfigurationError is not converted and propagates."""
        username = ""
        domain = ""
        try:
            principal = ctx.resolve_principal()
            username, domain = principal.username, principal.domain
            password = ctx.resolve_new_password()
            old_password = ctx.resolve_old_password()

            if not password:
                return ChangeOutcome(STATUS_IDLE, username=username, domain=domain)

            self.policy.validate(password)

            dn = user_dn(username, domain, self.config.root_domain)
            salted = self.hasher.hash(password)
            self.directory.change_credential(dn, old_password, salted.stored)
        except ConfigurationError:
            raise
        except DirectoryError as e:
            logger.warning("Password change failed for %s@%s at step %s: %s", username, domain, e.step, e.detail)
            return ChangeOutcome(STATUS_FAILURE, e.message, username=username, domain=domain)
        except PolicyError as e:
            logger.info("Password change rejected for %s@%s: %s", username, domain, e.reason)
            return ChangeOutcome(STATUS_FAILURE, e.message, username=username, domain=domain)
        except PortalError as e:
            logger.info("Password change refused for %s@%s: %s", username or "-", domain or "-", e.message)
            return ChangeOutcome(STATUS_FAILURE, e.message, username=username, domain=domain)

        logger.info("Password changed for %s@%s", username, domain)
        return ChangeOutcome(STATUS_SUCCESS, username=username, domain=domain)
