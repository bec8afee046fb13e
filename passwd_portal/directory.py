from __future__ import annotations

import logging
import ssl

from ldap3 import Server, Connection, Tls, SYNC, MODIFY_REPLACE
from ldap3.core.exceptions import LDAPException

from .config import DirectoryEndpoint
from .errors import DirectoryError

logger = logging.getLogger(__name__)

PASSWORD_ATTRIBUTE = "userPassword"


def _describe(conn: Connection, default: str = "unknown error") -> str:
    res = dict(conn.result or {})
    return str(res.get("description") or res.get("message") or default)


class DirectorySession:
    """One-shot LDAP transactions on behalf of the user being served.

    Every call opens its own connection and closes it before returning;
    nothing is pooled or shared between requests.
    """

    def __init__(
        self,
        endpoint: DirectoryEndpoint,
        server: Server | None = None,
        client_strategy: str = SYNC,
    ) -> None:
        self.endpoint = endpoint
        if server is None:
            tls = Tls(validate=ssl.CERT_REQUIRED if endpoint.tls_validate else ssl.CERT_NONE)
            server = Server(
                host=endpoint.host,
                port=endpoint.port,
                use_ssl=endpoint.use_ssl,
                tls=tls,
                connect_timeout=endpoint.timeout_s,
            )
        self.server = server
        self.client_strategy = client_strategy

    def _connect(self, dn: str, password: str) -> Connection:
        try:
            conn = Connection(
                self.server,
                user=dn,
                password=password,
                version=3,
                auto_bind=False,
                client_strategy=self.client_strategy,
                receive_timeout=self.endpoint.timeout_s,
            )
            conn.open()
        except LDAPException as e:
            raise DirectoryError("connect", str(e)) from e
        return conn

    def _configure(self, conn: Connection) -> None:
        # LDAPv3 is fixed at construction (Connection(version=3)); here only StartTLS.
        try:
            if self.endpoint.starttls and not conn.start_tls():
                raise DirectoryError("configure", _describe(conn, "StartTLS failed"))
        except LDAPException as e:
            raise DirectoryError("configure", str(e)) from e

    def _bind(self, conn: Connection) -> None:
        try:
            ok = conn.bind()
        except LDAPException as e:
            raise DirectoryError("bind", str(e)) from e
        if not ok:
            raise DirectoryError("bind", _describe(conn, "invalid credentials"))

    def _modify(self, conn: Connection, dn: str, value: str) -> None:
        try:
            ok = conn.modify(dn, {PASSWORD_ATTRIBUTE: [(MODIFY_REPLACE, [value])]})
        except LDAPException as e:
            raise DirectoryError("modify", str(e)) from e
        if not ok:
            raise DirectoryError("modify", _describe(conn))

    def _close(self, conn: Connection) -> None:
        try:
            ok = conn.unbind()
        except LDAPException as e:
            raise DirectoryError("close", str(e)) from e
        if not ok:
            raise DirectoryError("close", _describe(conn))

    def _release(self, conn: Connection) -> None:
        # Закрытие после уже случившейся ошибки: исходная ошибка важнее.
        try:
            self._close(conn)
        except DirectoryError as e:
            logger.warning("LDAP close after failed transaction also failed: %s", e)

    def change_credential(self, dn: str, old_password: str, new_encoded_hash: str) -> None:
        """Bind as ``dn`` with ``old_password`` and replace userPassword.

        Raises :class:`DirectoryError` naming the failed step. A ``close``
        failure is reported even though the modify may already be applied on
        the server; the caller cannot tell which password is now active.
        """
        conn = self._connect(dn, old_password)
        failed = True
        try:
            self._configure(conn)
            self._bind(conn)
            self._modify(conn, dn, new_encoded_hash)
            failed = False
        finally:
            if failed:
                self._release(conn)
        self._close(conn)

    def verify_credential(self, dn: str, password: str) -> bool:
        """Check a login by binding as ``dn``. Any failure means False."""
        if not password:
            # Пустой пароль = anonymous bind, который сервер может принять.
            return False
        try:
            conn = self._connect(dn, password)
        except DirectoryError as e:
            logger.warning("LDAP login check for %s: %s", dn, e)
            return False
        try:
            self._configure(conn)
            self._bind(conn)
            return True
        except DirectoryError as e:
            logger.info("LDAP login check for %s: %s", dn, e)
            return False
        finally:
            self._release(conn)
