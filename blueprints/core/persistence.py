from __future__ import annotations
import logging
from contextlib import contextmanager
from typing import Callable, Iterable

from sqlalchemy.exc import IntegrityError

from extensions import db
from models import MAX_ID
from .errors import ApiError, NotFound

log = logging.getLogger(__name__)


def in_id_range(pk: int) -> bool:
    return 0 < pk <= MAX_ID


def get_or_404(model, pk: int, message: str, options: Iterable = ()):
    """Load ``model`` by primary key or raise ``NotFound(message)``.

    Ids outside the storable range are reported as missing instead of
    reaching the driver.
    """
    if not in_id_range(pk):
        raise NotFound(message)
    row = db.session.get(model, pk, options=list(options))
    if row is None:
        raise NotFound(message)
    return row


@contextmanager
def conflicts_as(on_conflict: Callable[[], ApiError]):
    """A constraint violation inside the block becomes ``on_conflict()``."""
    try:
        yield
    except IntegrityError as ex:
        db.session.rollback()
        log.warning("integrity error on commit: %s", getattr(ex, "orig", ex))
        raise on_conflict() from ex


def commit_or_raise(on_conflict: Callable[[], ApiError]) -> None:
    """Commit the session; a constraint violation becomes ``on_conflict()``.

    Existence and uniqueness pre-checks run before every write, so this only
    fires when a concurrent request won the race.
    """
    with conflicts_as(on_conflict):
        db.session.commit()
