# workhub/schemas/user.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from workhub.db.models import Role


class AuthUser(BaseModel):
    """The authenticated caller, resolved once per request."""
    id: int
    email: str
    name: str
    role: Role

    model_config = ConfigDict(from_attributes=True)


class UserBase(BaseModel):
    email: EmailStr
    name: str = Field(min_length=1, max_length=100)


class UserRegister(UserBase):
    password: str = Field(min_length=8)


class UserCreate(UserRegister):
    role: Role = Role.EMPLOYEE


class User(UserBase):
    id: int
    role: Role
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RoleUpdate(BaseModel):
    role: Role


class PasswordUpdate(BaseModel):
    current_password: str
    new_password: str = Field(min_length=8)
