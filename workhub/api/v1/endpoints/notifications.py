# workhub/api/v1/endpoints/notifications.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from workhub.core import security
from workhub.core.context import AppContext, get_context
from workhub.db.session import get_db
from workhub.schemas import notification as notification_schema
from workhub.schemas.user import AuthUser

router = APIRouter()


@router.get("", response_model=List[notification_schema.Notification])
def list_notifications(
    unread_only: bool = False,
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
    current_user: AuthUser = Depends(security.get_current_user),
):
    return context.notifications.list_for_user(db, current_user.id, unread_only=unread_only, limit=limit)


@router.get("/unread-count", response_model=notification_schema.UnreadCount)
def unread_count(
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
    current_user: AuthUser = Depends(security.get_current_user),
):
    return {"unread": context.notifications.unread_count(db, current_user.id)}


@router.patch("/read-all")
def mark_all_read(
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
    current_user: AuthUser = Depends(security.get_current_user),
):
    updated = context.notifications.mark_all_as_read(db, current_user.id)
    return {"success": True, "updated": updated}


@router.patch("/{notification_id}/read", response_model=notification_schema.Notification)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
    current_user: AuthUser = Depends(security.get_current_user),
):
    """ Users can only mark their own notifications. """
    notification = context.notifications.mark_as_read(db, notification_id, current_user.id)
    if notification is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return notification


@router.delete("/{notification_id}")
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
    current_user: AuthUser = Depends(security.get_current_user),
):
    """ Another user's notification looks the same as a missing one. """
    if not context.notifications.delete(db, notification_id, current_user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return {"success": True}


@router.delete("")
def clear_notifications(
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
    current_user: AuthUser = Depends(security.get_current_user),
):
    deleted = context.notifications.clear_all(db, current_user.id)
    return {"success": True, "deleted": deleted}
