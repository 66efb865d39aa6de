"""
Idempotent seed script.
Usage:
  python seed.py --reset   # drop and recreate all tables, then seed
  python seed.py           # fill in missing default tracks and users (idempotent)
  python seed.py --demo    # also add a small demo taxonomy with one student assignment
"""
from __future__ import annotations
import argparse
import logging

from sqlalchemy import select

from app import create_app
from extensions import db
from models import (
    Building, Department, Room, Section, StdTbdrsMerge, TbdrsMerge, UUser,
)
from blueprints.auth.services import ensure_users
from blueprints.directory.services import ensure_default_tracks

log = logging.getLogger("seed")


def get_or_create(model, defaults=None, **by):
    """Idempotent create keyed on the unique columns passed in ``by``."""
    inst = db.session.scalar(select(model).filter_by(**by))
    if inst:
        return inst, False
    data = dict(by)
    if defaults:
        data.update(defaults)
    inst = model(**data)
    db.session.add(inst)
    db.session.flush()
    return inst, True


def seed_demo() -> dict:
    """Main building with two rooms, one department/section, one TBDRS, one assignment."""
    tracks, _ = ensure_default_tracks()
    main, _ = get_or_create(Building, building_name="Main")
    get_or_create(Room, building_id=main.id, room_number="101", defaults={"room_name": "Lab"})
    get_or_create(Room, building_id=main.id, room_number="102", defaults={"room_name": "Library"})
    dept, _ = get_or_create(Department, department_name="Senior High")
    sec, _ = get_or_create(Section, section_name="Grade 11 - A")
    tbdrs, _ = get_or_create(TbdrsMerge, track_id=tracks[0].id, building_id=main.id,
                             department_id=dept.id, section_id=sec.id)
    student = db.session.scalar(select(UUser).where(UUser.role == "student").order_by(UUser.id))
    if student is not None:
        get_or_create(StdTbdrsMerge, uusers_id=student.id, tbdrs_id=tbdrs.id)
    return {"building_id": main.id, "tbdrs_id": tbdrs.id}


def run(app, reset: bool = False, demo: bool = False) -> None:
    with app.app_context():
        if reset:
            db.drop_all()
        db.create_all()
        _, created_tracks = ensure_default_tracks()
        created_users = ensure_users(app.config.get("DEFAULT_USERS", []))
        if demo:
            seed_demo()
        db.session.commit()
        log.info("seed done: %d tracks, %d users created", created_tracks, created_users)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Seed the campus registry database")
    parser.add_argument("--reset", action="store_true", help="drop and recreate all tables first")
    parser.add_argument("--demo", action="store_true", help="add a demo building/TBDRS/assignment")
    parser.add_argument("--config", default=None, help="config name (dev, test, prod)")
    args = parser.parse_args(argv)
    run(create_app(args.config), reset=args.reset, demo=args.demo)
    print("DB initialized and seeded ✅")


if __name__ == "__main__":
    main()
