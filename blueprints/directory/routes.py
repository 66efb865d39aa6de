from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Type

from flask import request, url_for
from flask_login import login_required
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import joinedload, selectinload

from . import bp
from .schemas import (
    BuildingIn, BuildingOut, BuildingDetailOut,
    DepartmentIn, DepartmentOut,
    RoomIn, RoomDetailOut,
    SectionIn, SectionOut,
    TrackIn, TrackOut,
)
from .services import ensure_default_tracks, ensure_unreferenced, in_use
from extensions import db
from models import Building, Department, Room, Section, Track
from blueprints.core.persistence import commit_or_raise, conflicts_as, get_or_404
from blueprints.core.responses import created, dump, dump_many, ok
from blueprints.core.validators import Validator, invalid, taken

log = logging.getLogger(__name__)


# ----------------------- Named reference entities -----------------------
@dataclass(frozen=True)
class NamedEntity:
    """Building, Track, Department and Section share one CRUD shape."""
    model: Any
    field: str               # "building_name"
    key: str                 # "building"
    plural: str              # "buildings"
    label: str               # "Building"
    schema_in: Type[BaseModel]
    schema_out: Type[BaseModel]
    endpoint: str            # endpoint of the get-by-id view

    @property
    def column(self):
        return getattr(self.model, self.field)


BUILDINGS = NamedEntity(Building, "building_name", "building", "buildings", "Building",
                        BuildingIn, BuildingOut, "directory.buildings_get")
TRACKS = NamedEntity(Track, "track_name", "track", "tracks", "Track",
                     TrackIn, TrackOut, "directory.tracks_get")
DEPARTMENTS = NamedEntity(Department, "department_name", "department", "departments", "Department",
                          DepartmentIn, DepartmentOut, "directory.departments_get")
SECTIONS = NamedEntity(Section, "section_name", "section", "sections", "Section",
                       SectionIn, SectionOut, "directory.sections_get")


def _get_or_404(entity: NamedEntity, id: int, options=()):
    return get_or_404(entity.model, id, f"{entity.label} not found", options)


def _list(entity: NamedEntity):
    rows = db.session.scalars(select(entity.model).order_by(entity.model.id)).all()
    return ok({entity.plural: dump_many(entity.schema_out, rows),
               "message": f"{entity.label}s retrieved successfully"})


def _create(entity: NamedEntity):
    data = (
        Validator(entity.schema_in, request.get_json(silent=True))
        .unique(entity.field, entity.column)
        .validated()
    )
    row = entity.model(**{entity.field: getattr(data, entity.field)})
    db.session.add(row)
    commit_or_raise(lambda: taken(entity.field))
    log.info("%s created", entity.key, extra={"event": f"{entity.key}_created"})
    return created(url_for(entity.endpoint, id=row.id),
                   {entity.key: dump(entity.schema_out, row),
                    "message": f"{entity.label} created successfully"})


def _show(entity: NamedEntity, id: int, schema_out=None, options=()):
    row = _get_or_404(entity, id, options)
    return ok({entity.key: dump(schema_out or entity.schema_out, row),
               "message": f"{entity.label} retrieved successfully"})


def _update(entity: NamedEntity, id: int):
    row = _get_or_404(entity, id)
    data = (
        Validator(entity.schema_in, request.get_json(silent=True))
        .unique(entity.field, entity.column, ignore_id=id)
        .validated()
    )
    setattr(row, entity.field, getattr(data, entity.field))
    commit_or_raise(lambda: taken(entity.field))
    log.info("%s updated", entity.key, extra={"event": f"{entity.key}_updated"})
    return ok({entity.key: dump(entity.schema_out, row),
               "message": f"{entity.label} updated successfully"})


def _delete(entity: NamedEntity, id: int):
    row = _get_or_404(entity, id)
    ensure_unreferenced(row, entity.label)
    db.session.delete(row)
    commit_or_raise(lambda: in_use(entity.label))
    log.info("%s deleted", entity.key, extra={"event": f"{entity.key}_deleted"})
    return ok({"message": f"{entity.label} deleted successfully"})


# ---- Buildings ----
@bp.get("/buildings")
@login_required
def buildings_list():
    return _list(BUILDINGS)

@bp.post("/buildings")
@login_required
def buildings_create():
    return _create(BUILDINGS)

@bp.get("/buildings/<int:id>")
@login_required
def buildings_get(id: int):
    return _show(BUILDINGS, id, BuildingDetailOut, options=[selectinload(Building.rooms)])

@bp.put("/buildings/<int:id>")
@login_required
def buildings_update(id: int):
    return _update(BUILDINGS, id)

@bp.delete("/buildings/<int:id>")
@login_required
def buildings_delete(id: int):
    return _delete(BUILDINGS, id)

# ---- Tracks ----
@bp.get("/tracks")
@login_required
def tracks_list():
    return _list(TRACKS)

@bp.post("/tracks")
@login_required
def tracks_create():
    return _create(TRACKS)

@bp.post("/tracks/initialize")
@login_required
def tracks_initialize():
    # a concurrent initialize may insert the same names first
    with conflicts_as(lambda: taken("track_name")):
        tracks, created_count = ensure_default_tracks()
        db.session.commit()
    log.info("tracks initialized", extra={"event": "tracks_initialized"})
    return ok({"tracks": dump_many(TrackOut, tracks),
               "created": created_count,
               "message": "Default tracks initialized successfully"})

@bp.get("/tracks/<int:id>")
@login_required
def tracks_get(id: int):
    return _show(TRACKS, id)

@bp.put("/tracks/<int:id>")
@login_required
def tracks_update(id: int):
    return _update(TRACKS, id)

@bp.delete("/tracks/<int:id>")
@login_required
def tracks_delete(id: int):
    return _delete(TRACKS, id)

# ---- Departments ----
@bp.get("/departments")
@login_required
def departments_list():
    return _list(DEPARTMENTS)

@bp.post("/departments")
@login_required
def departments_create():
    return _create(DEPARTMENTS)

@bp.get("/departments/<int:id>")
@login_required
def departments_get(id: int):
    return _show(DEPARTMENTS, id)

@bp.put("/departments/<int:id>")
@login_required
def departments_update(id: int):
    return _update(DEPARTMENTS, id)

@bp.delete("/departments/<int:id>")
@login_required
def departments_delete(id: int):
    return _delete(DEPARTMENTS, id)

# ---- Sections ----
@bp.get("/sections")
@login_required
def sections_list():
    return _list(SECTIONS)

@bp.post("/sections")
@login_required
def sections_create():
    return _create(SECTIONS)

@bp.get("/sections/<int:id>")
@login_required
def sections_get(id: int):
    return _show(SECTIONS, id)

@bp.put("/sections/<int:id>")
@login_required
def sections_update(id: int):
    return _update(SECTIONS, id)

@bp.delete("/sections/<int:id>")
@login_required
def sections_delete(id: int):
    return _delete(SECTIONS, id)


# ----------------------- Rooms -----------------------
def _room_or_404(id: int) -> Room:
    return get_or_404(Room, id, "Room not found", [joinedload(Room.building)])

def _validate_room():
    return (
        Validator(RoomIn, request.get_json(silent=True))
        .exists("building_id", Building)
        .validated()
    )

@bp.get("/rooms")
@login_required
def rooms_list():
    rows = db.session.scalars(
        select(Room).options(joinedload(Room.building)).order_by(Room.id)
    ).all()
    return ok({"rooms": dump_many(RoomDetailOut, rows), "message": "Rooms retrieved successfully"})

@bp.post("/rooms")
@login_required
def rooms_create():
    parsed = _validate_room()
    r = Room(
        room_name=parsed.room_name,
        room_number=parsed.room_number,
        building_id=parsed.building_id,
    )
    db.session.add(r)
    commit_or_raise(lambda: invalid("building_id"))
    log.info("room created", extra={"event": "room_created"})
    return created(url_for("directory.rooms_get", id=r.id),
                   {"room": dump(RoomDetailOut, r), "message": "Room created successfully"})

@bp.get("/rooms/<int:id>")
@login_required
def rooms_get(id: int):
    r = _room_or_404(id)
    return ok({"room": dump(RoomDetailOut, r), "message": "Room retrieved successfully"})

@bp.put("/rooms/<int:id>")
@login_required
def rooms_update(id: int):
    r = _room_or_404(id)
    parsed = _validate_room()
    r.room_name = parsed.room_name
    r.room_number = parsed.room_number
    r.building_id = parsed.building_id
    commit_or_raise(lambda: invalid("building_id"))
    log.info("room updated", extra={"event": "room_updated"})
    return ok({"room": dump(RoomDetailOut, r), "message": "Room updated successfully"})

@bp.delete("/rooms/<int:id>")
@login_required
def rooms_delete(id: int):
    r = _room_or_404(id)
    db.session.delete(r)
    db.session.commit()
    log.info("room deleted", extra={"event": "room_deleted"})
    return ok({"message": "Room deleted successfully"})
