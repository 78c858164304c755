# workhub/core/context.py
from dataclasses import dataclass

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from workhub.core.config import Settings
from workhub.db.models import Base
from workhub.db.session import build_engine, build_session_factory
from workhub.services.email import EmailService
from workhub.services.notifications import NotificationEngine
from workhub.services.storage import LocalStorage


@dataclass
class AppContext:
    """Everything a handler needs that outlives a single request."""

    settings: Settings
    engine: Engine
    session_factory: sessionmaker
    mailer: EmailService
    storage: LocalStorage
    notifications: NotificationEngine


def build_context(settings: Settings, mailer: EmailService | None = None) -> AppContext:
    engine = build_engine(settings.DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    session_factory = build_session_factory(engine)

    if mailer is None:
        mailer = EmailService(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            user=settings.EMAIL_USER,
            password=settings.EMAIL_PASSWORD,
        )

    return AppContext(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        mailer=mailer,
        storage=LocalStorage(settings.UPLOAD_DIR),
        notifications=NotificationEngine(session_factory, mailer=mailer),
    )


def get_context(request: Request) -> AppContext:
    return request.app.state.context
