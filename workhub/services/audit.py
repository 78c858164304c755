# workhub/services/audit.py
from typing import Optional

from fastapi import Request
from pydantic import JsonValue
from sqlalchemy.orm import Session

from workhub.db import models


def client_ip(request: Optional[Request]) -> Optional[str]:
    if request is None:
        return None
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


class AuditService:
    @staticmethod
    def log_action(
        db: Session,
        *,
        action: str,
        entity_type: str,
        entity_id: Optional[object] = None,
        user_id: Optional[int] = None,
        old_values: JsonValue = None,
        new_values: JsonValue = None,
        request: Optional[Request] = None,
        commit: bool = True,
    ) -> models.AuditLog:
        entry = models.AuditLog(
            user_id=user_id,
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id) if entity_id is not None else None,
            old_values=old_values,
            new_values=new_values,
            ip_address=client_ip(request),
            user_agent=request.headers.get("User-Agent") if request is not None else None,
        )
        db.add(entry)
        if commit:
            db.commit()
        return entry
