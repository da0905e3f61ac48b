"""Announcement endpoints and store."""
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from app.core.errors import ValidationFailure
from app.models import Announcement, PushSubscription
from app.services import announcements as store


def _create(client: TestClient, headers: dict, title: str = "Sale", message: str = "Everything 20% off"):
    r = client.post("/api/announcements", json={"title": title, "message": message}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_create_then_list_all_roundtrip(client: TestClient, superadmin_headers: dict):
    before = datetime.now(timezone.utc)
    created = _create(client, superadmin_headers, "Pongal offers", "Festival prices this week")
    assert created["is_active"] is True

    r = client.get("/api/admin/announcements", headers=superadmin_headers)
    assert r.status_code == 200
    [item] = [a for a in r.json() if a["id"] == created["id"]]
    assert item["title"] == "Pongal offers"
    assert item["message"] == "Festival prices this week"
    created_at = datetime.fromisoformat(item["created_at"])
    # SQLite hands timestamps back without an offset; they are stored in UTC
    assert created_at.replace(tzinfo=created_at.tzinfo or timezone.utc) >= before.replace(microsecond=0)


def test_lists_are_newest_first(client: TestClient, superadmin_headers: dict):
    ids = [_create(client, superadmin_headers, f"t{i}", f"m{i}")["id"] for i in range(3)]
    listed = [a["id"] for a in client.get("/api/announcements").json()]
    assert listed == list(reversed(ids))


def test_public_list_hides_inactive(client: TestClient, superadmin_headers: dict):
    shown = _create(client, superadmin_headers, "shown", "visible")
    hidden = _create(client, superadmin_headers, "hidden", "not visible")
    r = client.patch(f"/api/announcements/{hidden['id']}", json={"is_active": False}, headers=superadmin_headers)
    assert r.status_code == 200
    assert r.json()["is_active"] is False

    public_ids = [a["id"] for a in client.get("/api/announcements").json()]
    assert public_ids == [shown["id"]]
    admin_ids = {a["id"] for a in client.get("/api/admin/announcements", headers=superadmin_headers).json()}
    assert admin_ids == {shown["id"], hidden["id"]}


def test_toggle_missing_announcement_is_404(client: TestClient, superadmin_headers: dict):
    r = client.patch("/api/announcements/999", json={"is_active": False}, headers=superadmin_headers)
    assert r.status_code == 404


@pytest.mark.parametrize(
    "body,error",
    [
        ({"title": "", "message": "hello"}, "Title is required."),
        ({"title": "hi", "message": "   "}, "Message is required."),
        ({"title": "hi"}, "Field 'message' is required."),
    ],
)
def test_create_validation(client: TestClient, superadmin_headers: dict, body, error):
    r = client.post("/api/announcements", json=body, headers=superadmin_headers)
    assert r.status_code == 422
    assert r.json()["error"] == error


def test_delete_is_idempotent(client: TestClient, superadmin_headers: dict):
    created = _create(client, superadmin_headers)
    assert client.delete(f"/api/announcements/{created['id']}", headers=superadmin_headers).status_code == 200
    assert client.delete(f"/api/announcements/{created['id']}", headers=superadmin_headers).status_code == 200
    assert client.get("/api/announcements").json() == []


def test_management_requires_token(client: TestClient):
    assert client.get("/api/admin/announcements").status_code == 401
    assert client.post("/api/announcements", json={"title": "a", "message": "b"}).status_code == 401
    assert client.delete("/api/announcements/1").status_code == 401


def test_admin_with_capability_disabled_is_forbidden(client: TestClient, make_admin):
    _, headers = make_admin("alice", permissions={"announcements": False})
    r = client.get("/api/admin/announcements", headers=headers)
    assert r.status_code == 403
    assert r.json()["error"] == "Access denied: 'announcements' permission is disabled"
    assert client.post("/api/announcements", json={"title": "a", "message": "b"}, headers=headers).status_code == 403
    # The public list stays open
    assert client.get("/api/announcements").status_code == 200


def test_other_capabilities_do_not_gate_announcements(client: TestClient, make_admin):
    _, headers = make_admin("alice", permissions={"products": False, "traffic": False})
    assert client.get("/api/admin/announcements", headers=headers).status_code == 200


def test_scenario_b_revocation_applies_to_live_token(client: TestClient, superadmin_headers: dict, make_admin):
    admin_id, alice = make_admin("alice")
    _create(client, alice, "by alice", "allowed")

    r = client.patch(
        f"/api/admin/{admin_id}/permissions",
        json={"permissions": {"announcements": False}},
        headers=superadmin_headers,
    )
    assert r.status_code == 200

    r = client.post("/api/announcements", json={"title": "again", "message": "denied"}, headers=alice)
    assert r.status_code == 403
    # Same token still authenticates; only the capability is gone
    assert client.get("/api/admin/me", headers=alice).status_code == 200

    client.patch(f"/api/admin/{admin_id}/permissions", json={"permissions": {}}, headers=superadmin_headers)
    assert client.get("/api/admin/announcements", headers=alice).status_code == 200


def test_store_rejects_blank_fields(db):
    with pytest.raises(ValidationFailure):
        store.create_announcement(db, "  ", "body")
    with pytest.raises(ValidationFailure):
        store.create_announcement(db, "title", "")


def test_store_delete_reports_missing(db):
    a = store.create_announcement(db, "t", "m")
    assert store.delete_announcement(db, a.id) is True
    assert store.delete_announcement(db, a.id) is False
    assert store.list_all_announcements(db) == []


def test_new_records_carry_utc_timestamps():
    assert Announcement(title="t", message="m").created_at.tzinfo is timezone.utc
    assert PushSubscription(endpoint="https://push.example.com/x", p256dh="p", auth="a").created_at.tzinfo is timezone.utc
