from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

from blueprints.auth.schemas import UserOut
from blueprints.directory.schemas import BuildingOut, DepartmentOut, SectionOut, TrackOut


# ---------- TBDRS combinations ----------
class TbdrsMergeIn(BaseModel):
    track_id: int
    building_id: int
    department_id: int
    section_id: int

class TbdrsMergeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    track_id: int
    building_id: int
    department_id: int
    section_id: int
    created_at: datetime
    updated_at: datetime
    track: Optional[TrackOut] = None
    building: Optional[BuildingOut] = None
    department: Optional[DepartmentOut] = None
    section: Optional[SectionOut] = None


# ---------- Student assignments ----------
class StdTbdrsMergeIn(BaseModel):
    uusers_id: int
    tbdrs_id: int

class StdTbdrsMergeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    uusers_id: int
    tbdrs_id: int
    created_at: datetime
    updated_at: datetime
    user: Optional[UserOut] = None
    tbdrs_merge: Optional[TbdrsMergeOut] = None
