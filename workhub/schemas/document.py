# workhub/schemas/document.py
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict


class Document(BaseModel):
    id: int
    project_id: int
    filename: str
    original_name: str
    file_type: str
    size: int
    url: str
    uploaded_by: int
    tags: List[str] = []
    uploaded_at: datetime

    model_config = ConfigDict(from_attributes=True)
