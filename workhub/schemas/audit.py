# workhub/schemas/audit.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, JsonValue


class AuditLog(BaseModel):
    id: int
    user_id: Optional[int] = None
    action: str
    entity_type: str
    entity_id: Optional[str] = None
    old_values: JsonValue = None
    new_values: JsonValue = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)
