import pytest
from ldap3 import Server, Connection, MOCK_SYNC

from passwd_portal import deps
from passwd_portal.config import PortalConfig
from passwd_portal.directory import DirectorySession
from passwd_portal.env_settings import get_env

ROOT_DOMAIN = "mailhost.org"
ALICE_DN = "uid=alice,ou=people,dc=example,dc=com,ou=vmail,dc=mailhost,dc=org"
ALICE_PASSWORD = "OldPass1"


def _clear_caches():
    get_env.cache_clear()
    deps.get_config.cache_clear()
    deps.get_use_case.cache_clear()


@pytest.fixture(autouse=True)
def env(monkeypatch):
    monkeypatch.setenv("APP_SECRET_KEY", "test-secret")
    monkeypatch.setenv("VMAIL_ROOT_DOMAIN", ROOT_DOMAIN)
    monkeypatch.delenv("TRUSTED_USER_HEADER", raising=False)
    _clear_caches()
    yield monkeypatch
    _clear_caches()


@pytest.fixture
def config():
    return PortalConfig(root_domain=ROOT_DOMAIN)


@pytest.fixture
def ldap_server():
    """In-memory directory with one mailbox: alice@example.com."""
    server = Server("fake_ldap")
    seed = Connection(server, client_strategy=MOCK_SYNC)
    seed.strategy.add_entry(
        ALICE_DN,
        {"objectClass": ["inetOrgPerson"], "uid": "alice", "sn": "alice", "userPassword": ALICE_PASSWORD},
    )
    return server


@pytest.fixture
def directory(config, ldap_server):
    return DirectorySession(config.directory, server=ldap_server, client_strategy=MOCK_SYNC)


def stored_password(server, dn):
    """userPassword as kept by the in-memory directory."""
    value = server.dit[dn]["userPassword"][0]
    return value.decode("utf-8") if isinstance(value, bytes) else value
