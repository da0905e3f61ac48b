"""Login and the bearer-token gate."""
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from app.api import auth as auth_api
from app.core.config import Settings
from app.core.security import create_access_token, verify_access_token
from conftest import SECRET_KEY, SUPERADMIN_PASSWORD, SUPERADMIN_USERNAME


def test_login_success_returns_token_for_stored_role(client: TestClient):
    r = client.post("/api/login", json={"username": SUPERADMIN_USERNAME, "password": SUPERADMIN_PASSWORD})
    assert r.status_code == 200
    j = r.json()
    assert j["username"] == SUPERADMIN_USERNAME
    assert j["role"] == "superadmin"
    assert j["permissions"] == {}
    claims = verify_access_token(j["token"], SECRET_KEY)
    assert claims.role == "superadmin"


def test_login_as_admin_reports_permission_map(client: TestClient, make_admin):
    make_admin("bob", "bob12345", permissions={"traffic": False})
    r = client.post("/api/login", json={"username": "bob", "password": "bob12345"})
    assert r.status_code == 200
    assert r.json()["role"] == "admin"
    assert r.json()["permissions"] == {"traffic": False}


def test_login_wrong_password_is_generic_401(client: TestClient):
    r = client.post("/api/login", json={"username": SUPERADMIN_USERNAME, "password": "wrongpass"})
    assert r.status_code == 401
    j = r.json()
    assert j["error"] == "Invalid credentials"
    assert "token" not in j


def test_login_unknown_user_looks_like_wrong_password(client: TestClient):
    wrong_pw = client.post("/api/login", json={"username": SUPERADMIN_USERNAME, "password": "nope"})
    no_user = client.post("/api/login", json={"username": "ghost", "password": "nope"})
    assert no_user.status_code == wrong_pw.status_code == 401
    assert no_user.json()["error"] == wrong_pw.json()["error"]


def test_login_requires_both_fields(client: TestClient):
    r = client.post("/api/login", json={"username": SUPERADMIN_USERNAME})
    assert r.status_code == 422
    assert r.json()["error"] == "Field 'password' is required."


def test_me_requires_token(client: TestClient):
    r = client.get("/api/admin/me")
    assert r.status_code == 401
    assert r.json()["error"] == "Not authorized, no token"
    assert r.headers.get("www-authenticate") == "Bearer"


def test_me_rejects_non_bearer_scheme(client: TestClient):
    r = client.get("/api/admin/me", headers={"Authorization": "Basic c3VwZXJhZG1pbjp4"})
    assert r.status_code == 401


def test_me_rejects_garbage_token(client: TestClient):
    r = client.get("/api/admin/me", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401
    assert r.json()["error"] == "Not authorized, token failed"


def test_me_rejects_expired_token(client: TestClient):
    token = create_access_token(1, "superadmin", SECRET_KEY, issued_at=datetime.now(timezone.utc) - timedelta(days=31))
    r = client.get("/api/admin/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


def test_me_rejects_token_from_other_secret(client: TestClient):
    token = create_access_token(1, "superadmin", "another-deployment")
    r = client.get("/api/admin/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


def test_me_with_token(client: TestClient, superadmin_headers: dict):
    r = client.get("/api/admin/me", headers=superadmin_headers)
    assert r.status_code == 200
    j = r.json()
    assert j["username"] == SUPERADMIN_USERNAME
    assert j["role"] == "superadmin"
    assert all(j["effective_permissions"].values())
    assert "hashed_password" not in j


def test_deleted_admin_token_stops_working(client: TestClient, superadmin_headers: dict, make_admin):
    admin_id, headers = make_admin("carol", "carol123")
    assert client.get("/api/admin/me", headers=headers).status_code == 200
    assert client.delete(f"/api/admin/{admin_id}", headers=superadmin_headers).status_code == 200
    r = client.get("/api/admin/me", headers=headers)
    assert r.status_code == 401
    assert r.json()["error"] == "Not authorized, user not found"


def test_me_reflects_current_permissions_not_token(client: TestClient, superadmin_headers: dict, make_admin):
    admin_id, headers = make_admin("dave", "dave1234")
    client.patch(
        f"/api/admin/{admin_id}/permissions",
        json={"permissions": {"products": False}},
        headers=superadmin_headers,
    )
    j = client.get("/api/admin/me", headers=headers).json()
    assert j["permissions"] == {"products": False}
    assert j["effective_permissions"]["products"] is False


def test_login_is_rate_limited_per_ip(client: TestClient, monkeypatch):
    tight = Settings(_env_file=None, rate_limit_login_per_minute=2)
    monkeypatch.setattr(auth_api, "get_settings", lambda: tight)
    bad = {"username": SUPERADMIN_USERNAME, "password": "wrongpass"}

    assert client.post("/api/login", json=bad).status_code == 401
    assert client.post("/api/login", json=bad).status_code == 401
    r = client.post("/api/login", json=bad)
    assert r.status_code == 429
    assert r.json()["error"] == "Too many requests. Please wait a minute."

    other_ip = {"X-Forwarded-For": "203.0.113.9"}
    assert client.post("/api/login", json=bad, headers=other_ip).status_code == 401
