# workhub/api/v1/endpoints/projects.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from workhub.api.deps import ensure_project_access, get_project_or_404, record_activity
from workhub.core import security
from workhub.core.context import AppContext, get_context
from workhub.db import models
from workhub.db.models import Role
from workhub.db.session import get_db
from workhub.schemas import project as project_schema
from workhub.schemas.notification import NotificationPayload
from workhub.schemas.user import AuthUser
from workhub.services.audit import AuditService

router = APIRouter()


@router.post("", response_model=project_schema.Project, status_code=status.HTTP_201_CREATED)
def create_project(
    project_in: project_schema.ProjectCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(security.require_roles(Role.ADMIN, Role.MANAGER)),
):
    """ Managers and admins create projects; the creator becomes the owner. """
    member_ids = sorted(set(project_in.member_ids) - {current_user.id})
    if member_ids:
        found = db.query(models.User.id).filter(models.User.id.in_(member_ids)).count()
        if found != len(member_ids):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown member id")

    project = models.Project(name=project_in.name, description=project_in.description, owner_id=current_user.id)
    project.members = [models.ProjectMember(user_id=uid) for uid in member_ids]
    db.add(project)
    db.flush()
    record_activity(db, project.id, "project_created", f"Project '{project.name}' created")
    AuditService.log_action(
        db, action="create", entity_type="project", entity_id=project.id, user_id=current_user.id,
        new_values={"name": project.name, "member_ids": member_ids}, request=request,
    )
    db.refresh(project)
    return project_schema.Project.from_model(project)


@router.get("", response_model=List[project_schema.Project])
def list_projects(
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(security.get_current_user),
):
    """ Projects the caller owns or belongs to (all of them for admins). """
    query = db.query(models.Project)
    if current_user.role != Role.ADMIN:
        member_of = db.query(models.ProjectMember.project_id).filter(models.ProjectMember.user_id == current_user.id)
        query = query.filter((models.Project.owner_id == current_user.id) | models.Project.id.in_(member_of))
    return [project_schema.Project.from_model(p) for p in query.order_by(models.Project.id).all()]


@router.post("/{project_id}/members", response_model=project_schema.Project)
def add_member(
    project_id: int,
    member: project_schema.MemberAdd,
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
    current_user: AuthUser = Depends(security.get_current_user),
):
    """ Adds a user to the project and tells them about it. """
    project = get_project_or_404(db, project_id)
    if current_user.role != Role.ADMIN and project.owner_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the project owner can add members")
    if db.get(models.User, member.user_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if member.user_id in project.member_ids():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User is already a member")

    project.members.append(models.ProjectMember(user_id=member.user_id))
    record_activity(db, project.id, "member_added", f"User {member.user_id} joined the project")
    db.commit()
    db.refresh(project)

    context.notifications.create_notification(db, NotificationPayload(
        user_id=member.user_id, type="team", action="assigned",
        title="Added to project", message=f"You were added to '{project.name}'",
        entity_type="project", entity_id=str(project.id), icon="users",
    ))
    return project_schema.Project.from_model(project)


@router.get("/{project_id}/activities", response_model=List[project_schema.Activity])
def list_activities(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(security.get_current_user),
):
    """ Project activity feed, newest first. """
    project = get_project_or_404(db, project_id)
    ensure_project_access(project, current_user)
    return db.query(models.Activity).filter(models.Activity.project_id == project_id).order_by(
        models.Activity.created_at.desc(), models.Activity.id.desc()
    ).all()
