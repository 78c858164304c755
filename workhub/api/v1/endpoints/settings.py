# workhub/api/v1/endpoints/settings.py
from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, Path, Request, status
from sqlalchemy.orm import Session

from workhub.core import security
from workhub.db import models
from workhub.db.session import get_db
from workhub.schemas import setting as setting_schema
from workhub.schemas.user import AuthUser
from workhub.services.audit import AuditService

router = APIRouter()

SettingKey = Annotated[str, Path(min_length=1, max_length=100, pattern=r"^[A-Za-z0-9_.\-]+$")]


@router.get("", response_model=List[setting_schema.Setting])
def list_settings(
    db: Session = Depends(get_db),
    admin: AuthUser = Depends(security.require_admin),
):
    return db.query(models.Setting).order_by(models.Setting.setting_key).all()


@router.get("/{key}", response_model=setting_schema.Setting)
def get_setting(
    key: SettingKey,
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(security.get_current_user),
):
    setting = db.query(models.Setting).filter(models.Setting.setting_key == key).first()
    if setting is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Setting not found")
    return setting


@router.put("/{key}", response_model=setting_schema.Setting)
def put_setting(
    update: setting_schema.SettingUpdate,
    request: Request,
    key: SettingKey,
    db: Session = Depends(get_db),
    admin: AuthUser = Depends(security.require_admin),
):
    """ Creates the setting or replaces its value. """
    setting = db.query(models.Setting).filter(models.Setting.setting_key == key).first()
    old_value = None
    if setting is None:
        setting = models.Setting(setting_key=key, setting_value=update.value, created_by=admin.id)
        db.add(setting)
        action = "create"
    else:
        old_value = setting.setting_value
        setting.setting_value = update.value
        setting.updated_at = models.utcnow()
        action = "update"

    db.flush()
    AuditService.log_action(
        db, action=action, entity_type="setting", entity_id=key, user_id=admin.id,
        old_values={"value": old_value}, new_values={"value": update.value}, request=request,
    )
    db.refresh(setting)
    return setting
