from .base import MAX_ID, TimestampMixin, utcnow
from .building import Building
from .room import Room
from .track import Track
from .department import Department
from .section import Section
from .tbdrs_merge import TbdrsMerge
from .std_tbdrs_merge import StdTbdrsMerge
from .user import UUser, UserRole, PersonalAccessToken

__all__ = [
    "MAX_ID", "TimestampMixin", "utcnow",
    "Building", "Room", "Track", "Department", "Section",
    "TbdrsMerge", "StdTbdrsMerge",
    "UUser", "UserRole", "PersonalAccessToken",
]
