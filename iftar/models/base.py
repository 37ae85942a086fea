from datetime import datetime, timezone
from uuid import uuid4

from iftar.extensions import db


# Opaque string ids so the same schema works on SQLite and PostgreSQL.
IDType = db.String(36)


def new_id():
    return str(uuid4())


def utcnow():
    return datetime.now(timezone.utc)


def isoformat(value):
    return value.isoformat() if value else None


class CreatedAtMixin:
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)


class TimestampMixin(CreatedAtMixin):
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
