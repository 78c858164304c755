# workhub/api/deps.py
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from workhub.db import models
from workhub.schemas.user import AuthUser


def get_project_or_404(db: Session, project_id: int) -> models.Project:
    project = db.get(models.Project, project_id)
    if project is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return project


def ensure_project_access(project: models.Project, user: AuthUser) -> None:
    """Admins see everything; everyone else must own or belong to the project."""
    if user.role == models.Role.ADMIN or user.id in project.member_ids():
        return
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You are not a member of this project")


def record_activity(db: Session, project_id: int, activity_type: str, title: str) -> models.Activity:
    activity = models.Activity(project_id=project_id, activity_type=activity_type, title=title)
    db.add(activity)
    return activity
