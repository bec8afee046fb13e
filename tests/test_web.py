import pytest
from fastapi.testclient import TestClient

from passwd_portal.deps import get_use_case
from passwd_portal.main import create_app
from passwd_portal.session import SESSION_COOKIE, create_session
from passwd_portal.use_case import ChangePasswordUseCase

from .conftest import ALICE_DN, ALICE_PASSWORD


@pytest.fixture
def use_case(config, directory):
    return ChangePasswordUseCase(config, directory=directory)


@pytest.fixture
def client(use_case):
    app = create_app(configure_logging=False)
    app.dependency_overrides[get_use_case] = lambda: use_case
    with TestClient(app, base_url="http://mail.example.com", follow_redirects=False) as c:
        yield c


@pytest.fixture
def alice(client):
    client.cookies.set(SESSION_COOKIE, create_session({"username": "alice", "domain": "example.com"}))
    return client


def test_form_requires_login(client):
    resp = client.get("/")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/login"


def test_form_requires_login_htmx(client):
    resp = client.get("/", headers={"HX-Request": "true"})
    assert resp.status_code == 401
    assert resp.headers["HX-Redirect"] == "/login"


def test_login_with_directory_password(client):
    resp = client.post("/login", data={"username": "alice", "password": ALICE_PASSWORD})
    assert resp.status_code == 303
    assert resp.headers["location"] == "/"
    assert SESSION_COOKIE in resp.cookies

    page = client.get("/")
    assert page.status_code == 200
    assert "You are logged in as" in page.text
    assert "alice" in page.text
    assert 'href="http://example.com/"' in page.text


def test_login_with_wrong_password(client):
    resp = client.post("/login", data={"username": "alice", "password": "nope"})
    assert resp.status_code == 200
    assert "Invalid username or password." in resp.text
    assert SESSION_COOKIE not in resp.cookies


def test_login_requires_username(client):
    resp = client.post("/login", data={"username": "", "password": "x"}, headers={"HX-Request": "true"})
    assert "alert-danger" in resp.text
    assert "Enter your username." in resp.text


def test_session_from_other_domain_is_ignored(client):
    client.cookies.set(SESSION_COOKIE, create_session({"username": "alice", "domain": "other.org"}))
    assert client.get("/").status_code == 303


def test_tampered_session_is_ignored(client):
    client.cookies.set(SESSION_COOKIE, "not-a-signed-token")
    assert client.get("/").status_code == 303


def test_change_password(alice):
    resp = alice.post(
        "/",
        data={"oldpassword": ALICE_PASSWORD, "password": "Secret1", "password2": "Secret1"},
    )
    assert resp.status_code == 200
    assert "Your password has been changed." in resp.text

    again = alice.post(
        "/",
        data={"oldpassword": ALICE_PASSWORD, "password": "Secret2", "password2": "Secret2"},
    )
    assert "Sorry, password change failed" in again.text


def test_change_password_mismatch(alice):
    resp = alice.post("/", data={"oldpassword": ALICE_PASSWORD, "password": "Secret1", "password2": "Secret2"})
    assert "Sorry, passwords do not match" in resp.text
    assert "has been changed" not in resp.text


def test_change_password_htmx(alice):
    resp = alice.post(
        "/",
        data={"oldpassword": ALICE_PASSWORD, "password": "short", "password2": "short"},
        headers={"HX-Request": "true"},
    )
    assert resp.text.startswith("<div class='alert alert-danger")
    assert "password must have at least 6 characters" in resp.text


def test_submit_without_new_password_is_idle(alice):
    resp = alice.post("/", data={"oldpassword": ALICE_PASSWORD})
    assert resp.status_code == 200
    assert "alert-success" not in resp.text
    assert "alert-danger" not in resp.text


def test_post_without_login(client):
    resp = client.post("/", data={"password": "Secret1", "password2": "Secret1"})
    assert "Sorry, you must be logged in to change the password" in resp.text


def test_trusted_header_is_escaped(env, use_case):
    env.setenv("TRUSTED_USER_HEADER", "X-Remote-User")
    app = create_app(configure_logging=False)
    app.dependency_overrides[get_use_case] = lambda: use_case
    with TestClient(app, base_url="http://mail.example.com") as c:
        resp = c.get("/", headers={"X-Remote-User": "<b>bob</b>"})
        assert resp.status_code == 200
        assert "&lt;b&gt;bob&lt;/b&gt;" in resp.text
        assert "<b>bob</b>" not in resp.text

        # Без заголовка доверенного прокси пользователя нет.
        assert c.get("/", follow_redirects=False).status_code == 303


def test_logout(alice):
    resp = alice.get("/logout")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/login"


def test_directory_dn_for_session_user(alice, directory):
    alice.post("/", data={"oldpassword": ALICE_PASSWORD, "password": "Secret1", "password2": "Secret1"})
    assert directory.verify_credential(ALICE_DN, ALICE_PASSWORD) is False


def test_port_in_host_is_ignored(use_case):
    app = create_app(configure_logging=False)
    app.dependency_overrides[get_use_case] = lambda: use_case
    with TestClient(app, base_url="http://mail.example.com:8443", follow_redirects=False) as c:
        resp = c.post("/login", data={"username": "alice", "password": ALICE_PASSWORD})
        assert resp.status_code == 303
        assert SESSION_COOKIE in resp.cookies


def test_hostile_host_header_is_rejected(client):
    resp = client.get("/login", headers={"host": "mail.x,ou=people,uid=bob.com"})
    assert resp.status_code == 500
    assert "misconfigured" in resp.text
