"""Lookups shared by the TBDRS views: duplicate detection and eager-load specs."""
from __future__ import annotations
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import joinedload

from extensions import db
from models import StdTbdrsMerge, TbdrsMerge

# track/building/department/section, one JOIN each
TBDRS_RELATIONS = (
    TbdrsMerge.track,
    TbdrsMerge.building,
    TbdrsMerge.department,
    TbdrsMerge.section,
)


def tbdrs_load_options():
    return [joinedload(rel) for rel in TBDRS_RELATIONS]


def assignment_load_options():
    """user + tbdrs_merge + the four relations of the tbdrs_merge."""
    return [joinedload(StdTbdrsMerge.user)] + [
        joinedload(StdTbdrsMerge.tbdrs_merge).joinedload(rel) for rel in TBDRS_RELATIONS
    ]


def find_combination(track_id: int, building_id: int, department_id: int, section_id: int,
                     exclude_id: Optional[int] = None) -> Optional[TbdrsMerge]:
    stmt = (
        select(TbdrsMerge)
        .options(*tbdrs_load_options())
        .where(
            TbdrsMerge.track_id == track_id,
            TbdrsMerge.building_id == building_id,
            TbdrsMerge.department_id == department_id,
            TbdrsMerge.section_id == section_id,
        )
    )
    if exclude_id is not None:
        stmt = stmt.where(TbdrsMerge.id != exclude_id)
    return db.session.scalars(stmt).first()


def find_assignment(uusers_id: int, tbdrs_id: int) -> Optional[StdTbdrsMerge]:
    stmt = (
        select(StdTbdrsMerge)
        .options(*assignment_load_options())
        .where(StdTbdrsMerge.uusers_id == uusers_id, StdTbdrsMerge.tbdrs_id == tbdrs_id)
    )
    return db.session.scalars(stmt).first()
