from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

# Opaque identifier used for every entity at the store boundary.
EntityId = str


def utcnow() -> datetime:
    return datetime.now(UTC)


def new_entity_id() -> EntityId:
    return str(uuid4())


class UUIDPrimaryKeyMixin:
    id: Mapped[EntityId] = mapped_column(String(36), primary_key=True, default=new_entity_id)


class CreatedAtMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class TimestampMixin(CreatedAtMixin):
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
