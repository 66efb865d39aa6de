from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Tuple

from sqlalchemy import func, select

from config import DEFAULT_TRACKS
from extensions import db
from models import Building, Department, Room, Section, TbdrsMerge, Track
from blueprints.core.errors import Unprocessable

log = logging.getLogger(__name__)

# rows that block deletion of a reference entity (FKs are ON DELETE RESTRICT)
REFERENCES = {
    Building: {"rooms": Room.building_id, "tbdrs_merges": TbdrsMerge.building_id},
    Track: {"tbdrs_merges": TbdrsMerge.track_id},
    Department: {"tbdrs_merges": TbdrsMerge.department_id},
    Section: {"tbdrs_merges": TbdrsMerge.section_id},
}


def ensure_default_tracks(names: Iterable[str] = DEFAULT_TRACKS) -> Tuple[List[Track], int]:
    """Get-or-create each track by name. Returns (tracks, created_count); caller commits."""
    tracks: List[Track] = []
    created = 0
    for name in names:
        track = db.session.scalar(select(Track).where(Track.track_name == name))
        if track is None:
            track = Track(track_name=name)
            db.session.add(track)
            created += 1
        tracks.append(track)
    db.session.flush()
    if created:
        log.info("default tracks created", extra={"event": "tracks_initialized"})
    return tracks, created


def count_references(row) -> Dict[str, int]:
    counts = {}
    for key, column in REFERENCES.get(type(row), {}).items():
        n = db.session.scalar(select(func.count()).select_from(column.class_).where(column == row.id))
        if n:
            counts[key] = n
    return counts


def in_use(label: str, counts: Dict[str, int] | None = None) -> Unprocessable:
    return Unprocessable(f"{label} is still in use and cannot be deleted",
                         {"references": counts} if counts else None)


def ensure_unreferenced(row, label: str) -> None:
    counts = count_references(row)
    if counts:
        raise in_use(label, counts)
