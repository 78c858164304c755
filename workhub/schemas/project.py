# workhub/schemas/project.py
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ProjectCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = ""
    member_ids: List[int] = []


class Project(BaseModel):
    id: int
    name: str
    description: str
    owner_id: int
    created_at: datetime
    member_ids: List[int] = []

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_model(cls, project) -> "Project":
        return cls(
            id=project.id, name=project.name, description=project.description,
            owner_id=project.owner_id, created_at=project.created_at,
            member_ids=sorted(m.user_id for m in project.members),
        )


class MemberAdd(BaseModel):
    user_id: int


class Activity(BaseModel):
    id: int
    activity_type: str
    title: str
    project_id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
