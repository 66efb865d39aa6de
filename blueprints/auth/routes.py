from __future__ import annotations
import logging

from flask import Blueprint, request, url_for
from flask_login import current_user, login_required
from sqlalchemy import select

from extensions import db
from models import UUser
from blueprints.core.errors import Forbidden, Unauthenticated
from blueprints.core.responses import created, dump, dump_many, ok
from blueprints.core.persistence import commit_or_raise, get_or_404
from blueprints.core.validators import Validator, taken
from .schemas import LoginIn, RegisterIn, UserOut, UserUpdateIn
from .tokens import issue_token, revoke_current_token

bp = Blueprint("auth", __name__)
log = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def _get_user(user_id: int) -> UUser:
    return get_or_404(UUser, user_id, "User not found")


# ---------- public ----------
@bp.post("/login")
def login():
    data = Validator(LoginIn, request.get_json(silent=True)).validated()
    user = db.session.scalar(select(UUser).where(UUser.email == data.email))
    # same body for unknown email and wrong password
    if user is None or not user.check_password(data.password):
        log.warning("login rejected")
        raise Unauthenticated(INVALID_CREDENTIALS)
    if not user.is_active:
        raise Forbidden("Account is deactivated")

    token = issue_token(user)
    db.session.commit()
    log.info("login", extra={"user_id": user.id})
    return ok({"user": dump(UserOut, user), "token": token, "message": "Login successful"})


@bp.post("/register")
def register():
    data = (
        Validator(RegisterIn, request.get_json(silent=True))
        .unique("email", UUser.email)
        .validated()
    )
    user = UUser(
        firstname=data.firstname,
        lastname=data.lastname,
        email=data.email,
        role=data.role.value,
        activate=True,
    )
    user.set_password(data.password)
    db.session.add(user)
    commit_or_raise(lambda: taken("email"))
    log.info("user registered", extra={"user_id": user.id})
    return created(url_for("auth.users_get", user_id=user.id),
                   {"user": dump(UserOut, user), "message": "User created successfully"})


# ---------- session ----------
@bp.post("/logout")
@login_required
def logout():
    revoke_current_token()
    return ok({"message": "Successfully logged out"})


@bp.get("/user")
@login_required
def me():
    return ok(dump(UserOut, current_user._get_current_object()))


# ---------- users ----------
@bp.get("/users")
@login_required
def users_list():
    rows = db.session.scalars(select(UUser).order_by(UUser.id)).all()
    return ok({"users": dump_many(UserOut, rows), "message": "Users retrieved successfully"})


@bp.get("/users/<int:user_id>")
@login_required
def users_get(user_id: int):
    user = _get_user(user_id)
    return ok({"user": dump(UserOut, user), "message": "User retrieved successfully"})


@bp.put("/users/<int:user_id>")
@login_required
def users_update(user_id: int):
    user = _get_user(user_id)
    data = (
        Validator(UserUpdateIn, request.get_json(silent=True))
        .unique("email", UUser.email, ignore_id=user_id)
        .validated()
    )
    user.firstname = data.firstname
    user.lastname = data.lastname
    user.email = data.email
    user.role = data.role.value
    if data.activate is not None:
        user.activate = data.activate
    if data.password:
        user.set_password(data.password)
    commit_or_raise(lambda: taken("email"))
    log.info("user updated", extra={"user_id": user.id})
    return ok({"user": dump(UserOut, user), "message": "User updated successfully"})


@bp.delete("/users/<int:user_id>")
@login_required
def users_delete(user_id: int):
    user = _get_user(user_id)
    db.session.delete(user)
    db.session.commit()
    log.info("user deleted", extra={"user_id": user_id})
    return ok({"message": "User deleted successfully"})
