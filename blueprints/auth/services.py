from __future__ import annotations
import logging
from typing import Iterable, Mapping

from sqlalchemy import select

from extensions import db
from models import UUser

log = logging.getLogger(__name__)


def ensure_users(users: Iterable[Mapping]) -> int:
    """Create each configured user unless the email is already registered.

    Returns how many were created; caller commits.
    """
    created = 0
    for u in users:
        if db.session.scalar(select(UUser).where(UUser.email == u["email"])):
            continue
        user = UUser(firstname=u["firstname"], lastname=u["lastname"], email=u["email"],
                     role=u["role"], activate=True)
        user.set_password(u["password"])
        db.session.add(user)
        created += 1
    db.session.flush()
    if created:
        log.info("default users created", extra={"event": "users_seeded"})
    return created
