from __future__ import annotations

import smtplib
from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from workhub.db import models
from workhub.db.models import ReportStatus, Role

from conftest import RecordingMailer


@pytest.fixture
def setup(make_user, make_project):
    admin = make_user("admin@example.com", Role.ADMIN, name="Admin")
    manager = make_user("mgr@example.com", Role.MANAGER, name="Mia Manager")
    project = make_project(manager, name="Apollo")
    return admin, manager, project


def _payload(project_id, **overrides):
    payload = {
        "project_id": project_id,
        "week_start": "2025-03-03",
        "week_end": "2025-03-09",
        "summary": "  Shipped the onboarding flow  ",
        "progress_percentage": 60,
    }
    payload.update(overrides)
    return payload


@pytest.mark.parametrize("value", [-1, 101, None])
def test_model_rejects_progress_outside_bounds(value):
    with pytest.raises(ValueError):
        models.WeeklyReport(summary="x", progress_percentage=value)


def test_model_accepts_bounds():
    assert models.WeeklyReport(summary="x", progress_percentage=0).progress_percentage == 0
    assert models.WeeklyReport(summary="x", progress_percentage=100).progress_percentage == 100


def test_database_constraint_backs_up_the_validator(session_factory, setup):
    _, manager, project = setup
    now = datetime.now(timezone.utc)
    with session_factory() as db:
        report = models.WeeklyReport(
            manager_id=manager.id, project_id=project.id, week_start=now, week_end=now, summary="x",
        )
        db.add(report)
        db.flush()
        # bypass the ORM validator to hit the CHECK constraint
        with pytest.raises(IntegrityError):
            db.execute(
                models.WeeklyReport.__table__.update()
                .where(models.WeeklyReport.__table__.c.id == report.id)
                .values(progress_percentage=150)
            )
            db.commit()


def test_create_report(client, setup, auth_headers):
    _, manager, project = setup
    response = client.post("/api/v1/weekly-reports", json=_payload(project.id), headers=auth_headers(manager))
    assert response.status_code == 201
    body = response.json()
    assert body["summary"] == "Shipped the onboarding flow"
    assert body["week_number"] == 10
    assert body["status"] == "DRAFT"
    assert body["manager_id"] == manager.id


def test_create_report_validation(client, setup, auth_headers, make_user):
    _, manager, project = setup
    headers = auth_headers(manager)

    too_high = client.post("/api/v1/weekly-reports", json=_payload(project.id, progress_percentage=101), headers=headers)
    assert too_high.status_code == 422
    assert "between 0 and 100" in too_high.json()["detail"]

    backwards = client.post("/api/v1/weekly-reports", json=_payload(project.id, week_end="2025-03-01"), headers=headers)
    assert backwards.status_code == 422

    blank = client.post("/api/v1/weekly-reports", json=_payload(project.id, summary="   "), headers=headers)
    assert blank.status_code == 422

    employee = make_user("emp@example.com")
    denied = client.post("/api/v1/weekly-reports", json=_payload(project.id), headers=auth_headers(employee))
    assert denied.status_code == 403


def test_update_and_list(client, setup, auth_headers, make_user):
    admin, manager, project = setup
    headers = auth_headers(manager)
    report_id = client.post("/api/v1/weekly-reports", json=_payload(project.id), headers=headers).json()["id"]

    updated = client.patch(f"/api/v1/weekly-reports/{report_id}", json={"progress_percentage": 75}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["progress_percentage"] == 75

    rejected = client.patch(f"/api/v1/weekly-reports/{report_id}", json={"progress_percentage": 175}, headers=headers)
    assert rejected.status_code == 422

    other = make_user("other@example.com", Role.MANAGER)
    assert client.get("/api/v1/weekly-reports", headers=auth_headers(other)).json() == []
    assert len(client.get("/api/v1/weekly-reports", headers=auth_headers(admin)).json()) == 1
    assert client.patch(
        f"/api/v1/weekly-reports/{report_id}", json={"summary": "mine now"}, headers=auth_headers(other)
    ).status_code == 403


def test_submit_emails_admins(client, setup, auth_headers, mailer):
    admin, manager, project = setup
    headers = auth_headers(manager)
    report_id = client.post("/api/v1/weekly-reports", json=_payload(project.id), headers=headers).json()["id"]

    submitted = client.post(f"/api/v1/weekly-reports/{report_id}/submit", headers=headers)
    assert submitted.status_code == 200
    assert submitted.json()["status"] == "SUBMITTED"

    assert [m["to"] for m in mailer.sent] == ["admin@example.com"]
    assert mailer.sent[0]["subject"] == "Weekly report submitted: Apollo"
    assert "Mia Manager" in mailer.sent[0]["html"]
    assert "60%" in mailer.sent[0]["html"]

    again = client.post(f"/api/v1/weekly-reports/{report_id}/submit", headers=headers)
    assert again.status_code == 409


def test_submit_mail_failure_propagates_and_keeps_draft(setup, settings, auth_headers, session_factory):
    from fastapi.testclient import TestClient
    from workhub.main import create_app

    _, manager, project = setup
    failing = create_app(settings, mailer=RecordingMailer(fail_with=smtplib.SMTPException("down")))
    client = TestClient(failing)
    headers = auth_headers(manager)
    report_id = client.post("/api/v1/weekly-reports", json=_payload(project.id), headers=headers).json()["id"]

    with pytest.raises(smtplib.SMTPException):
        client.post(f"/api/v1/weekly-reports/{report_id}/submit", headers=headers)

    with session_factory() as db:
        assert db.get(models.WeeklyReport, report_id).status == ReportStatus.DRAFT.value


def test_get_report_by_id(client, setup, auth_headers, make_user):
    admin, manager, project = setup
    report_id = client.post(
        "/api/v1/weekly-reports", json=_payload(project.id), headers=auth_headers(manager)
    ).json()["id"]

    mine = client.get(f"/api/v1/weekly-reports/{report_id}", headers=auth_headers(manager))
    assert mine.status_code == 200
    assert mine.json()["id"] == report_id
    assert client.get(f"/api/v1/weekly-reports/{report_id}", headers=auth_headers(admin)).status_code == 200

    other = make_user("other@example.com", Role.MANAGER)
    assert client.get(f"/api/v1/weekly-reports/{report_id}", headers=auth_headers(other)).status_code == 403
    assert client.get("/api/v1/weekly-reports/9999", headers=auth_headers(admin)).status_code == 404


def test_list_filters_by_status(client, setup, auth_headers):
    _, manager, project = setup
    headers = auth_headers(manager)
    draft_id = client.post("/api/v1/weekly-reports", json=_payload(project.id), headers=headers).json()["id"]
    submitted_id = client.post(
        "/api/v1/weekly-reports",
        json=_payload(project.id, week_start="2025-03-10", week_end="2025-03-16"),
        headers=headers,
    ).json()["id"]
    client.post(f"/api/v1/weekly-reports/{submitted_id}/submit", headers=headers)

    drafts = client.get("/api/v1/weekly-reports", params={"status": "DRAFT"}, headers=headers)
    assert [r["id"] for r in drafts.json()] == [draft_id]
    submitted = client.get("/api/v1/weekly-reports", params={"status": "SUBMITTED"}, headers=headers)
    assert [r["id"] for r in submitted.json()] == [submitted_id]
    assert len(client.get("/api/v1/weekly-reports", headers=headers).json()) == 2
    assert client.get("/api/v1/weekly-reports", params={"status": "ARCHIVED"}, headers=headers).status_code == 422


def test_delete_report_rules(client, setup, auth_headers, make_user, session_factory):
    admin, manager, project = setup
    headers = auth_headers(manager)
    draft_id = client.post("/api/v1/weekly-reports", json=_payload(project.id), headers=headers).json()["id"]
    submitted_id = client.post(
        "/api/v1/weekly-reports",
        json=_payload(project.id, week_start="2025-03-10", week_end="2025-03-16"),
        headers=headers,
    ).json()["id"]
    client.post(f"/api/v1/weekly-reports/{submitted_id}/submit", headers=headers)

    other = make_user("other@example.com", Role.MANAGER)
    assert client.delete(f"/api/v1/weekly-reports/{draft_id}", headers=auth_headers(other)).status_code == 403

    # the author can drop a draft but not a submitted report
    removed = client.delete(f"/api/v1/weekly-reports/{draft_id}", headers=headers)
    assert removed.status_code == 200
    assert removed.json() == {"success": True, "message": "Report removed"}
    assert client.delete(f"/api/v1/weekly-reports/{submitted_id}", headers=headers).status_code == 409

    # admins can remove anything
    assert client.delete(f"/api/v1/weekly-reports/{submitted_id}", headers=auth_headers(admin)).status_code == 200
    assert client.get(f"/api/v1/weekly-reports/{submitted_id}", headers=auth_headers(admin)).status_code == 404

    with session_factory() as db:
        deletions = db.query(models.AuditLog).filter(
            models.AuditLog.entity_type == "weekly_report", models.AuditLog.action == "delete"
        ).count()
    assert deletions == 2
