from __future__ import annotations
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class _In(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


class _Out(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    updated_at: datetime


# ---------- Buildings ----------
class BuildingIn(_In):
    building_name: str = Field(min_length=1, max_length=255)

class BuildingOut(_Out):
    building_name: str

# ---------- Rooms ----------
class RoomIn(_In):
    room_name: str = Field(min_length=1, max_length=255)
    room_number: str = Field(min_length=1, max_length=50)
    building_id: int

class RoomOut(_Out):
    room_name: str
    room_number: str
    building_id: int

class RoomDetailOut(RoomOut):
    building: Optional[BuildingOut] = None

class BuildingDetailOut(BuildingOut):
    rooms: List[RoomOut] = []

# ---------- Tracks ----------
class TrackIn(_In):
    track_name: str = Field(min_length=1, max_length=255)

class TrackOut(_Out):
    track_name: str

# ---------- Departments ----------
class DepartmentIn(_In):
    department_name: str = Field(min_length=1, max_length=255)

class DepartmentOut(_Out):
    department_name: str

# ---------- Sections ----------
class SectionIn(_In):
    section_name: str = Field(min_length=1, max_length=255)

class SectionOut(_Out):
    section_name: str
