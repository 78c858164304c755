# workhub/api/v1/endpoints/holidays.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from workhub.core import security
from workhub.db import models
from workhub.db.session import get_db
from workhub.schemas import holiday as holiday_schema
from workhub.schemas.user import AuthUser
from workhub.services.audit import AuditService

router = APIRouter()


def _snapshot(holiday: models.Holiday) -> dict:
    return {
        "name": holiday.name, "date": holiday.date,
        "description": holiday.description, "is_recurring": holiday.is_recurring,
    }


def _ensure_date_free(db: Session, date: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(models.Holiday).filter(models.Holiday.date == date)
    if exclude_id is not None:
        query = query.filter(models.Holiday.id != exclude_id)
    if query.first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="A holiday already exists on that date")


@router.get("", response_model=List[holiday_schema.Holiday])
def list_holidays(
    year: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(security.get_current_user),
):
    """ Holiday calendar ordered by date, optionally limited to one year. """
    query = db.query(models.Holiday)
    if year is not None:
        query = query.filter(models.Holiday.date.like(f"{year:04d}-%"))
    return query.order_by(models.Holiday.date).all()


@router.post("", response_model=holiday_schema.Holiday, status_code=status.HTTP_201_CREATED)
def create_holiday(
    holiday_in: holiday_schema.HolidayCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: AuthUser = Depends(security.require_admin),
):
    _ensure_date_free(db, holiday_in.date)
    holiday = models.Holiday(**holiday_in.model_dump())
    db.add(holiday)
    db.flush()
    AuditService.log_action(
        db, action="create", entity_type="holiday", entity_id=holiday.id, user_id=admin.id,
        new_values=_snapshot(holiday), request=request,
    )
    db.refresh(holiday)
    return holiday


@router.put("/{holiday_id}", response_model=holiday_schema.Holiday)
def update_holiday(
    holiday_id: int,
    updates: holiday_schema.HolidayUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: AuthUser = Depends(security.require_admin),
):
    holiday = db.get(models.Holiday, holiday_id)
    if not holiday:
        raise HTTPException(status_code=404, detail="Holiday not found")

    update_data = updates.model_dump(exclude_unset=True, exclude_none=True)
    if "date" in update_data:
        _ensure_date_free(db, update_data["date"], exclude_id=holiday_id)

    old_values = _snapshot(holiday)
    for field, value in update_data.items():
        setattr(holiday, field, value)
    AuditService.log_action(
        db, action="update", entity_type="holiday", entity_id=holiday_id, user_id=admin.id,
        old_values=old_values, new_values=_snapshot(holiday), request=request,
    )
    db.refresh(holiday)
    return holiday


@router.delete("/{holiday_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_holiday(
    holiday_id: int,
    request: Request,
    db: Session = Depends(get_db),
    admin: AuthUser = Depends(security.require_admin),
):
    holiday = db.get(models.Holiday, holiday_id)
    if not holiday:
        raise HTTPException(status_code=404, detail="Holiday not found")

    old_values = _snapshot(holiday)
    db.delete(holiday)
    AuditService.log_action(
        db, action="delete", entity_type="holiday", entity_id=holiday_id, user_id=admin.id,
        old_values=old_values, request=request,
    )
    return
