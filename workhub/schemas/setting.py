# workhub/schemas/setting.py
from datetime import datetime

from pydantic import BaseModel, ConfigDict, JsonValue


class SettingUpdate(BaseModel):
    value: JsonValue = None


class Setting(BaseModel):
    id: int
    setting_key: str
    setting_value: JsonValue = None
    created_by: int
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
