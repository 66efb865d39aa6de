from __future__ import annotations
from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints

from models import UserRole

PersonName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RegisterIn(BaseModel):
    firstname: PersonName
    lastname: PersonName
    email: EmailStr
    password: str = Field(min_length=6, max_length=255)
    role: UserRole


class UserUpdateIn(BaseModel):
    firstname: PersonName
    lastname: PersonName
    email: EmailStr
    role: UserRole
    activate: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=6, max_length=255)


class UserOut(BaseModel):
    """Public view of a user. Never carries the password hash."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    firstname: str
    lastname: str
    email: str
    role: str
    activate: bool
    created_at: datetime
    updated_at: datetime
