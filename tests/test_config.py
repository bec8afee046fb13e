import dataclasses

import pytest

from passwd_portal.config import DirectoryEndpoint, PortalConfig
from passwd_portal.env_settings import get_env
from passwd_portal.errors import ConfigurationError


def test_defaults():
    cfg = PortalConfig()
    assert cfg.root_domain == "example.com"
    assert (cfg.minimum_length, cfg.minimum_nonalpha) == (6, 1)
    assert (cfg.directory.host, cfg.directory.port) == ("127.0.0.1", 389)


def test_from_env(env):
    env.setenv("LDAP_HOST", "ldap.internal")
    env.setenv("LDAP_PORT", "636")
    env.setenv("LDAP_USE_SSL", "true")
    env.setenv("PASSWORD_MIN_LENGTH", "10")
    env.setenv("TRUSTED_USER_HEADER", " X-Remote-User ")
    get_env.cache_clear()

    cfg = PortalConfig.from_env()
    assert cfg.root_domain == "mailhost.org"
    assert cfg.minimum_length == 10
    assert cfg.directory == DirectoryEndpoint(host="ldap.internal", port=636, use_ssl=True)
    assert cfg.trusted_user_header == "X-Remote-User"


def test_is_immutable():
    cfg = PortalConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.root_domain = "other.org"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"root_domain": ""},
        {"root_domain": " . "},
        {"root_domain": "mailhost.org,ou=admins"},
        {"minimum_length": -1},
        {"directory": DirectoryEndpoint(host="")},
        {"directory": DirectoryEndpoint(port=0)},
        {"directory": DirectoryEndpoint(use_ssl=True, starttls=True)},
    ],
)
def test_invalid_config_fails_fast(kwargs):
    with pytest.raises(ConfigurationError):
        PortalConfig(**kwargs)
