# workhub/services/notifications.py
import logging
from html import escape
from typing import List, Optional

from sqlalchemy.orm import Session, sessionmaker

from workhub.db import models
from workhub.schemas.notification import NotificationEvent, NotificationPayload
from workhub.services.email import EmailService

logger = logging.getLogger(__name__)


def render_notification_email(event: NotificationEvent) -> str:
    return f"<h3>{escape(event.title)}</h3><p>{escape(event.message)}</p>"


class NotificationEngine:
    """
    Persists in-app notifications and fans project events out to members.

    Fan-out is at-most-once and best effort: a failure is logged and the
    event is dropped, the caller is never told.
    """

    def __init__(self, session_factory: sessionmaker, mailer: Optional[EmailService] = None):
        self.session_factory = session_factory
        self.mailer = mailer

    def create_notification(self, db: Session, payload: NotificationPayload) -> List[models.Notification]:
        fields = payload.model_dump(exclude={"user_id", "user_ids"})
        rows = [models.Notification(user_id=user_id, **fields) for user_id in payload.recipients()]
        if rows:
            db.add_all(rows)
            db.commit()
        return rows

    def notify_project(
        self,
        project_id: int,
        event: NotificationEvent,
        exclude_user_id: Optional[int] = None,
        email: bool = False,
    ) -> int:
        """Notifies the owner and members of a project. Returns how many were notified."""
        try:
            with self.session_factory() as db:
                project = db.get(models.Project, project_id)
                if project is None:
                    logger.warning("notify_project: project %s not found", project_id)
                    return 0

                recipients = sorted(project.member_ids() - {exclude_user_id})
                if not recipients:
                    return 0

                payload = NotificationPayload(user_ids=recipients, **event.model_dump())
                self.create_notification(db, payload)
                logger.info("Notified %d member(s) of project %s: %s", len(recipients), project_id, event.title)

                if email and self.mailer is not None:
                    users = db.query(models.User).filter(models.User.id.in_(recipients)).all()
                    self._email_users(users, event)
                return len(recipients)
        except Exception:
            logger.exception("Failed to notify project %s", project_id)
            return 0

    def _email_users(self, users: List[models.User], event: NotificationEvent) -> None:
        html = render_notification_email(event)
        for user in users:
            try:
                self.mailer.send_email(to=user.email, subject=event.title, html=html)
            except Exception:
                logger.exception("Notification email to %s failed", user.email)

    def list_for_user(self, db: Session, user_id: int, unread_only: bool = False, limit: int = 50):
        query = db.query(models.Notification).filter(models.Notification.user_id == user_id)
        if unread_only:
            query = query.filter(models.Notification.read.is_(False))
        return query.order_by(models.Notification.created_at.desc(), models.Notification.id.desc()).limit(limit).all()

    def unread_count(self, db: Session, user_id: int) -> int:
        return db.query(models.Notification).filter(
            models.Notification.user_id == user_id,
            models.Notification.read.is_(False),
        ).count()

    def mark_as_read(self, db: Session, notification_id: int, user_id: int) -> Optional[models.Notification]:
        notification = db.query(models.Notification).filter(
            models.Notification.id == notification_id,
            models.Notification.user_id == user_id,
        ).first()
        if notification is None:
            return None
        if not notification.read:
            notification.read = True
            notification.read_at = models.utcnow()
            db.commit()
        return notification

    def mark_all_as_read(self, db: Session, user_id: int) -> int:
        updated = db.query(models.Notification).filter(
            models.Notification.user_id == user_id,
            models.Notification.read.is_(False),
        ).update({"read": True, "read_at": models.utcnow()}, synchronize_session=False)
        db.commit()
        return updated

    def delete(self, db: Session, notification_id: int, user_id: int) -> bool:
        """Deletes one of the user's notifications. False when it is not theirs or does not exist."""
        deleted = db.query(models.Notification).filter(
            models.Notification.id == notification_id,
            models.Notification.user_id == user_id,
        ).delete(synchronize_session=False)
        db.commit()
        return deleted > 0

    def clear_all(self, db: Session, user_id: int) -> int:
        deleted = db.query(models.Notification).filter(
            models.Notification.user_id == user_id,
        ).delete(synchronize_session=False)
        db.commit()
        return deleted
