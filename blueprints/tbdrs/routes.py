from __future__ import annotations
import logging

from flask import request, url_for
from flask_login import login_required
from sqlalchemy import select

from . import bp
from .schemas import StdTbdrsMergeIn, StdTbdrsMergeOut, TbdrsMergeIn, TbdrsMergeOut
from .services import (
    assignment_load_options,
    find_assignment,
    find_combination,
    tbdrs_load_options,
)
from extensions import db
from models import Building, Department, Section, StdTbdrsMerge, TbdrsMerge, Track, UUser
from blueprints.core.errors import Conflict, Unprocessable
from blueprints.core.persistence import commit_or_raise, get_or_404
from blueprints.core.responses import created, dump, dump_many, ok
from blueprints.core.validators import Validator

log = logging.getLogger(__name__)

DUPLICATE_COMBINATION = "This TBDRS combination already exists"
DUPLICATE_ASSIGNMENT = "This student is already assigned to this TBDRS"
ONLY_STUDENTS = "Only students can be assigned to TBDRS"


# ----------------------- Helpers -----------------------
def _tbdrs_or_404(id: int) -> TbdrsMerge:
    return get_or_404(TbdrsMerge, id, "TBDRS merge not found", tbdrs_load_options())

def _assignment_or_404(id: int) -> StdTbdrsMerge:
    return get_or_404(StdTbdrsMerge, id, "Student TBDRS merge not found", assignment_load_options())

def _validate_combination() -> TbdrsMergeIn:
    return (
        Validator(TbdrsMergeIn, request.get_json(silent=True))
        .exists("track_id", Track)
        .exists("building_id", Building)
        .exists("department_id", Department)
        .exists("section_id", Section)
        .validated()
    )

def _combination_conflict(data: TbdrsMergeIn, exclude_id: int | None = None) -> Conflict | None:
    existing = find_combination(**data.model_dump(), exclude_id=exclude_id)
    if existing is None:
        return None
    return Conflict(DUPLICATE_COMBINATION, "tbdrs_merge", dump(TbdrsMergeOut, existing))

def _race_conflict(data: TbdrsMergeIn, exclude_id: int | None = None):
    # the committed winner is visible once the failed transaction is rolled back
    return _combination_conflict(data, exclude_id) or Conflict(DUPLICATE_COMBINATION, "tbdrs_merge", None)


# ----------------------- TBDRS combinations -----------------------
@bp.get("/tbdrs-merge")
@login_required
def tbdrs_list():
    rows = db.session.scalars(
        select(TbdrsMerge).options(*tbdrs_load_options()).order_by(TbdrsMerge.id)
    ).all()
    return ok({"tbdrs_merges": dump_many(TbdrsMergeOut, rows),
               "message": "TBDRS merges retrieved successfully"})

@bp.post("/tbdrs-merge")
@login_required
def tbdrs_create():
    data = _validate_combination()
    conflict = _combination_conflict(data)
    if conflict:
        raise conflict
    t = TbdrsMerge(**data.model_dump())
    db.session.add(t)
    commit_or_raise(lambda: _race_conflict(data))
    log.info("tbdrs merge created", extra={"event": "tbdrs_merge_created"})
    return created(url_for("tbdrs.tbdrs_get", id=t.id),
                   {"tbdrs_merge": dump(TbdrsMergeOut, _tbdrs_or_404(t.id)),
                    "message": "TBDRS merge created successfully"})

@bp.get("/tbdrs-merge/<int:id>")
@login_required
def tbdrs_get(id: int):
    t = _tbdrs_or_404(id)
    return ok({"tbdrs_merge": dump(TbdrsMergeOut, t), "message": "TBDRS merge retrieved successfully"})

@bp.put("/tbdrs-merge/<int:id>")
@login_required
def tbdrs_update(id: int):
    t = _tbdrs_or_404(id)
    data = _validate_combination()
    conflict = _combination_conflict(data, exclude_id=id)
    if conflict:
        raise conflict
    t.track_id = data.track_id
    t.building_id = data.building_id
    t.department_id = data.department_id
    t.section_id = data.section_id
    commit_or_raise(lambda: _race_conflict(data, exclude_id=id))
    log.info("tbdrs merge updated", extra={"event": "tbdrs_merge_updated"})
    return ok({"tbdrs_merge": dump(TbdrsMergeOut, _tbdrs_or_404(id)),
               "message": "TBDRS merge updated successfully"})

@bp.delete("/tbdrs-merge/<int:id>")
@login_required
def tbdrs_delete(id: int):
    t = _tbdrs_or_404(id)
    # student assignments go with it (ON DELETE CASCADE)
    db.session.delete(t)
    db.session.commit()
    log.info("tbdrs merge deleted", extra={"event": "tbdrs_merge_deleted"})
    return ok({"message": "TBDRS merge deleted successfully"})


# ----------------------- Student assignments -----------------------
@bp.get("/std-tbdrs-merge")
@login_required
def assignments_list():
    rows = db.session.scalars(
        select(StdTbdrsMerge).options(*assignment_load_options()).order_by(StdTbdrsMerge.id)
    ).all()
    return ok({"std_tbdrs_merges": dump_many(StdTbdrsMergeOut, rows),
               "message": "Student TBDRS merges retrieved successfully"})

@bp.post("/std-tbdrs-merge")
@login_required
def assignments_create():
    data = (
        Validator(StdTbdrsMergeIn, request.get_json(silent=True))
        .exists("uusers_id", UUser)
        .exists("tbdrs_id", TbdrsMerge)
        .validated()
    )
    user = db.session.get(UUser, data.uusers_id)
    if not user.is_student:
        raise Unprocessable(ONLY_STUDENTS)

    def duplicate():
        existing = find_assignment(data.uusers_id, data.tbdrs_id)
        return Conflict(DUPLICATE_ASSIGNMENT, "std_tbdrs_merge",
                        dump(StdTbdrsMergeOut, existing) if existing else None)

    if find_assignment(data.uusers_id, data.tbdrs_id) is not None:
        raise duplicate()

    a = StdTbdrsMerge(uusers_id=data.uusers_id, tbdrs_id=data.tbdrs_id)
    db.session.add(a)
    commit_or_raise(duplicate)
    log.info("student assigned", extra={"event": "std_tbdrs_merge_created", "user_id": data.uusers_id})
    return created(url_for("tbdrs.assignments_get", id=a.id),
                   {"std_tbdrs_merge": dump(StdTbdrsMergeOut, _assignment_or_404(a.id)),
                    "message": "Student TBDRS merge created successfully"})

@bp.get("/std-tbdrs-merge/<int:id>")
@login_required
def assignments_get(id: int):
    a = _assignment_or_404(id)
    return ok({"std_tbdrs_merge": dump(StdTbdrsMergeOut, a),
               "message": "Student TBDRS merge retrieved successfully"})

@bp.get("/std-tbdrs-merge/student/<int:user_id>")
@login_required
def assignments_by_student(user_id: int):
    user = get_or_404(UUser, user_id, "User not found")
    if not user.is_student:
        raise Unprocessable("User is not a student")
    rows = db.session.scalars(
        select(StdTbdrsMerge)
        .options(*assignment_load_options())
        .where(StdTbdrsMerge.uusers_id == user_id)
        .order_by(StdTbdrsMerge.id)
    ).all()
    return ok({"std_tbdrs_merges": dump_many(StdTbdrsMergeOut, rows),
               "message": "Student TBDRS merges retrieved successfully"})

@bp.delete("/std-tbdrs-merge/<int:id>")
@login_required
def assignments_delete(id: int):
    a = _assignment_or_404(id)
    db.session.delete(a)
    db.session.commit()
    log.info("student assignment deleted", extra={"event": "std_tbdrs_merge_deleted"})
    return ok({"message": "Student TBDRS merge deleted successfully"})
