# workhub/db/models.py
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import (
    JSON, Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer,
    LargeBinary, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship, validates

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"


class ReportStatus(str, Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"


NOTIFICATION_TYPES = ("team", "project", "task", "meeting", "issue", "chat", "system")
NOTIFICATION_ACTIONS = ("created", "updated", "deleted", "assigned", "commented", "mentioned", "completed")
DOCUMENT_TYPES = ("pdf", "doc", "docx", "xls", "xlsx", "png", "jpg", "jpeg", "gif", "plain", "octet-stream")


def _in(column: str, values) -> str:
    return f"{column} IN ({', '.join(repr(v) for v in values)})"


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=Role.EMPLOYEE.value)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    __table_args__ = ( CheckConstraint(_in("role", [r.value for r in Role])), )

    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")


class Project(Base):
    __tablename__ = "projects"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    owner = relationship("User")
    members = relationship("ProjectMember", back_populates="project", cascade="all, delete-orphan")
    documents = relationship("Document", back_populates="project", cascade="all, delete-orphan")

    def member_ids(self) -> set[int]:
        return {m.user_id for m in self.members} | {self.owner_id}


class ProjectMember(Base):
    __tablename__ = "project_members"
    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    __table_args__ = ( UniqueConstraint("project_id", "user_id"), )

    project = relationship("Project", back_populates="members")
    user = relationship("User")


class Document(Base):
    __tablename__ = "documents"
    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    filename = Column(String(255), nullable=False)
    original_name = Column(String(255), nullable=False)
    file_type = Column(String(20), nullable=False)
    size = Column(Integer, nullable=False)
    url = Column(String(500), nullable=False)
    uploaded_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    uploaded_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    __table_args__ = ( CheckConstraint(_in("file_type", DOCUMENT_TYPES)), )

    project = relationship("Project", back_populates="documents")
    uploader = relationship("User")


class Image(Base):
    __tablename__ = "images"
    id = Column(Integer, primary_key=True, index=True)
    filename = Column(String(255), nullable=False)
    mimetype = Column(String(100), nullable=False)
    data = Column(LargeBinary, nullable=False)
    uploaded_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    uploaded_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class Activity(Base):
    __tablename__ = "activities"
    id = Column(Integer, primary_key=True, index=True)
    activity_type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class AuditLog(Base):
    __tablename__ = "audit_logs"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    action = Column(String(50), nullable=False)
    entity_type = Column(String(50), nullable=False, index=True)
    entity_id = Column(String(100), nullable=True)
    old_values = Column(JSON, nullable=True)
    new_values = Column(JSON, nullable=True)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(255), nullable=True)
    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class Holiday(Base):
    __tablename__ = "holidays"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    date = Column(String(10), nullable=False, unique=True)  # YYYY-MM-DD
    description = Column(Text, nullable=False, default="")
    is_recurring = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class Setting(Base):
    __tablename__ = "settings"
    id = Column(Integer, primary_key=True, index=True)
    setting_key = Column(String(100), unique=True, nullable=False, index=True)
    setting_value = Column(JSON, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class WeeklyReport(Base):
    __tablename__ = "weekly_reports"
    id = Column(Integer, primary_key=True, index=True)
    manager_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    week_start = Column(DateTime(timezone=True), nullable=False)
    week_end = Column(DateTime(timezone=True), nullable=False)
    week_number = Column(Integer, nullable=True)
    summary = Column(Text, nullable=False)
    progress_percentage = Column(Integer, nullable=False, default=0)
    team_performance = Column(Text, nullable=False, default="")
    issues_faced = Column(Text, nullable=False, default="")
    next_week_plan = Column(Text, nullable=False, default="")
    status = Column(String(20), nullable=False, default=ReportStatus.DRAFT.value)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    __table_args__ = (
        CheckConstraint("progress_percentage >= 0 AND progress_percentage <= 100"),
        CheckConstraint(_in("status", [s.value for s in ReportStatus])),
    )

    manager = relationship("User")
    project = relationship("Project")

    @validates("progress_percentage")
    def validate_progress(self, key, value):
        if value is None or not 0 <= value <= 100:
            raise ValueError("progress_percentage must be between 0 and 100")
        return value

    @validates("summary")
    def validate_summary(self, key, value):
        if not value or not value.strip():
            raise ValueError("Weekly summary is required")
        return value.strip()


class Notification(Base):
    __tablename__ = "notifications"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(20), nullable=False)
    action = Column(String(20), nullable=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False, index=True)
    read_at = Column(DateTime(timezone=True), nullable=True)
    entity_type = Column(String(50), nullable=True)
    entity_id = Column(String(100), nullable=True)
    icon = Column(String(50), nullable=True)
    color = Column(String(20), nullable=True)
    action_url = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    __table_args__ = (
        CheckConstraint(_in("type", NOTIFICATION_TYPES)),
        CheckConstraint(f"action IS NULL OR {_in('action', NOTIFICATION_ACTIONS)}"),
    )

    user = relationship("User", back_populates="notifications")
