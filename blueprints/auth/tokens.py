"""Bearer tokens for the JSON API.

A token is handed out once as ``"<id>|<secret>"``; only the SHA-256 of the
secret is stored, so a leaked database does not leak usable tokens.
"""
from __future__ import annotations
import hashlib
import logging
import secrets
from datetime import timedelta
from typing import Optional

from flask import current_app, g, jsonify
from sqlalchemy import select

from extensions import db, login_manager
from models import PersonalAccessToken, UUser, utcnow
from blueprints.core.persistence import in_id_range

log = logging.getLogger(__name__)


def _digest(secret: str) -> str:
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()


def issue_token(user: UUser, name: str = "auth_token") -> str:
    """Create a token row for ``user`` and return the plain-text token.

    The caller commits.
    """
    secret = secrets.token_hex(20)
    ttl = current_app.config.get("TOKEN_TTL_MINUTES")
    pat = PersonalAccessToken(
        user=user,
        name=name,
        token=_digest(secret),
        expires_at=utcnow() + timedelta(minutes=ttl) if ttl else None,
    )
    db.session.add(pat)
    db.session.flush()
    return f"{pat.id}|{secret}"


def find_token(plain: str) -> Optional[PersonalAccessToken]:
    token_id, sep, secret = plain.partition("|")
    if not sep:
        return db.session.scalar(select(PersonalAccessToken).where(PersonalAccessToken.token == _digest(plain)))
    # str.isdigit() alone lets through superscripts that int() rejects
    if not (token_id.isascii() and token_id.isdigit() and len(token_id) <= 19):
        return None
    pat_id = int(token_id)
    if not in_id_range(pat_id):
        return None
    pat = db.session.get(PersonalAccessToken, pat_id)
    if pat is None or not secrets.compare_digest(pat.token, _digest(secret)):
        return None
    return pat


def authenticate(plain: str) -> Optional[UUser]:
    pat = find_token(plain)
    if pat is None:
        return None
    if pat.expires_at is not None and pat.expires_at <= utcnow():
        return None
    user = pat.user
    if not user.is_active:
        return None
    pat.last_used_at = utcnow()
    db.session.commit()
    g.access_token = pat
    return user


def revoke_current_token() -> bool:
    pat = g.get("access_token")
    if pat is None:
        return False
    db.session.delete(pat)
    db.session.commit()
    g.access_token = None
    return True


@login_manager.request_loader
def load_user_from_request(req) -> Optional[UUser]:
    scheme, _, token = req.headers.get("Authorization", "").partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        return None
    user = authenticate(token)
    if user is None:
        log.warning("bearer token rejected", extra={"path": req.path})
    return user


@login_manager.unauthorized_handler
def _unauthenticated():
    return jsonify({"message": "Unauthenticated"}), 401
