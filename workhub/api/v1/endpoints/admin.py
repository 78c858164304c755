# workhub/api/v1/endpoints/admin.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from workhub.core import security
from workhub.db import models
from workhub.db.session import get_db
from workhub.schemas import audit as audit_schema
from workhub.schemas import user as user_schema
from workhub.schemas.user import AuthUser
from workhub.services.audit import AuditService

router = APIRouter()


@router.post("/users", response_model=user_schema.User, status_code=status.HTTP_201_CREATED)
def create_user(
    user_in: user_schema.UserCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: AuthUser = Depends(security.require_admin),
):
    """ Creates a new user profile with any role. """
    email = user_in.email.lower()
    if db.query(models.User).filter(models.User.email == email).first():
        raise HTTPException(status_code=409, detail="Email already registered")

    db_user = models.User(
        email=email, name=user_in.name,
        hashed_password=security.get_password_hash(user_in.password),
        role=user_in.role.value,
    )
    db.add(db_user)
    db.flush()
    AuditService.log_action(
        db, action="create", entity_type="user", entity_id=db_user.id, user_id=admin.id,
        new_values={"email": email, "role": user_in.role.value}, request=request,
    )
    db.refresh(db_user)
    return db_user


@router.get("/users", response_model=List[user_schema.User])
def get_all_users(
    db: Session = Depends(get_db),
    admin: AuthUser = Depends(security.require_admin),
):
    """ Retrieves a list of all users. """
    return db.query(models.User).order_by(models.User.id).all()


@router.put("/users/{user_id}/role", response_model=user_schema.User)
def update_user_role(
    user_id: int,
    update: user_schema.RoleUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: AuthUser = Depends(security.require_admin),
):
    """ Changes a user's role. """
    db_user = db.get(models.User, user_id)
    if not db_user:
        raise HTTPException(status_code=404, detail="User not found")

    old_role = db_user.role
    db_user.role = update.role.value
    AuditService.log_action(
        db, action="update_role", entity_type="user", entity_id=user_id, user_id=admin.id,
        old_values={"role": old_role}, new_values={"role": update.role.value}, request=request,
    )
    db.refresh(db_user)
    return db_user


@router.get("/audit-logs", response_model=List[audit_schema.AuditLog])
def list_audit_logs(
    entity_type: Optional[str] = None,
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
    admin: AuthUser = Depends(security.require_admin),
):
    """ Most recent audit entries first. """
    query = db.query(models.AuditLog)
    if entity_type:
        query = query.filter(models.AuditLog.entity_type == entity_type)
    return query.order_by(models.AuditLog.timestamp.desc(), models.AuditLog.id.desc()).limit(limit).all()
