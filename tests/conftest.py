from __future__ import annotations

from typing import Optional

import pytest
from fastapi.testclient import TestClient

from workhub.core import security
from workhub.core.config import Settings
from workhub.db import models
from workhub.main import create_app


class RecordingMailer:
    """Stands in for EmailService; keeps what would have been sent."""

    def __init__(self, fail_with: Optional[Exception] = None):
        self.sent: list[dict] = []
        self.fail_with = fail_with

    def send_email(self, to: str, subject: str, html: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append({"to": to, "subject": subject, "html": html})


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        JWT_SECRET_KEY="test-secret",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        MAX_UPLOAD_BYTES=1024,
        EMAIL_USER="noreply@example.com",
    )


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def app(settings, mailer):
    return create_app(settings, mailer=mailer)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def session_factory(app):
    return app.state.context.session_factory


@pytest.fixture
def make_user(session_factory):
    def _make(email: str, role: models.Role = models.Role.EMPLOYEE, name: str = "Test User",
              password: str = "password123") -> models.User:
        with session_factory() as db:
            user = models.User(
                email=email, name=name, role=role.value,
                hashed_password=security.get_password_hash(password),
            )
            db.add(user)
            db.commit()
            db.refresh(user)
            return user
    return _make


@pytest.fixture
def auth_headers(settings):
    def _headers(user: models.User) -> dict:
        return {"Authorization": f"Bearer {security.create_access_token(user, settings)}"}
    return _headers


@pytest.fixture
def make_project(session_factory):
    def _make(owner: models.User, members=(), name: str = "Apollo") -> models.Project:
        with session_factory() as db:
            project = models.Project(name=name, description="", owner_id=owner.id)
            project.members = [models.ProjectMember(user_id=m.id) for m in members]
            db.add(project)
            db.commit()
            db.refresh(project)
            return project
    return _make
