from __future__ import annotations

from workhub.db import models
from workhub.db.models import Role


def test_project_membership_and_visibility(client, make_user, auth_headers, session_factory):
    manager = make_user("mgr@example.com", Role.MANAGER)
    alice = make_user("alice@example.com")
    bob = make_user("bob@example.com")
    admin = make_user("admin@example.com", Role.ADMIN)

    created = client.post(
        "/api/v1/projects", json={"name": "Apollo", "member_ids": [alice.id]}, headers=auth_headers(manager)
    )
    assert created.status_code == 201
    project_id = created.json()["id"]
    assert created.json()["member_ids"] == [alice.id]

    assert client.post(
        "/api/v1/projects", json={"name": "Ghosts", "member_ids": [9999]}, headers=auth_headers(manager)
    ).status_code == 400

    assert [p["id"] for p in client.get("/api/v1/projects", headers=auth_headers(alice)).json()] == [project_id]
    assert client.get("/api/v1/projects", headers=auth_headers(bob)).json() == []
    assert len(client.get("/api/v1/projects", headers=auth_headers(admin)).json()) == 1

    # only the owner (or an admin) can add members
    assert client.post(
        f"/api/v1/projects/{project_id}/members", json={"user_id": bob.id}, headers=auth_headers(alice)
    ).status_code == 403
    added = client.post(f"/api/v1/projects/{project_id}/members", json={"user_id": bob.id}, headers=auth_headers(manager))
    assert added.status_code == 200
    assert sorted(added.json()["member_ids"]) == sorted([alice.id, bob.id])
    assert client.post(
        f"/api/v1/projects/{project_id}/members", json={"user_id": bob.id}, headers=auth_headers(manager)
    ).status_code == 409

    with session_factory() as db:
        note = db.query(models.Notification).filter(models.Notification.user_id == bob.id).one()
    assert note.title == "Added to project"
    assert note.action == "assigned"

    feed = client.get(f"/api/v1/projects/{project_id}/activities", headers=auth_headers(bob))
    assert [a["activity_type"] for a in feed.json()] == ["member_added", "project_created"]


def test_image_round_trip(client, make_user, auth_headers):
    user = make_user("user@example.com")
    headers = auth_headers(user)
    png = b"\x89PNG\r\n\x1a\nfake"

    created = client.post("/api/v1/images", files={"file": ("avatar.png", png, "image/png")}, headers=headers)
    assert created.status_code == 201
    assert created.json()["mimetype"] == "image/png"
    assert created.json()["uploaded_by"] == user.id

    fetched = client.get(f"/api/v1/images/{created.json()['id']}")
    assert fetched.status_code == 200
    assert fetched.content == png
    assert fetched.headers["content-type"] == "image/png"

    not_image = client.post("/api/v1/images", files={"file": ("a.txt", b"hello", "text/plain")}, headers=headers)
    assert not_image.status_code == 400
    assert client.get("/api/v1/images/9999").status_code == 404
