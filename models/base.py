from datetime import datetime, UTC

from extensions import db

# widest integer primary key the stores accept (signed 64-bit)
MAX_ID = 2**63 - 1


def utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)
