from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sports_admin.db.base import Base
from sports_admin.models.common import EntityId, TimestampMixin, UUIDPrimaryKeyMixin


class Event(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "events"
    __table_args__ = (CheckConstraint("max_participants >= 1", name="ck_events_max_participants"),)

    admin_id: Mapped[EntityId] = mapped_column(
        String(36), ForeignKey("admins.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)  # Individual | Team
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="Upcoming", index=True)
    max_participants: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    participants = relationship(
        "EventParticipant",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="EventParticipant.position",
    )
    admin = relationship("Admin", back_populates="events")


class EventParticipant(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "event_participants"
    __table_args__ = (
        UniqueConstraint("event_id", "student_id", name="uq_event_participants_student"),
        CheckConstraint("score >= 0", name="ck_event_participants_score"),
    )

    event_id: Mapped[EntityId] = mapped_column(
        String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Not a foreign key: a deleted student leaves a dangling reference behind.
    student_id: Mapped[EntityId] = mapped_column(String(36), nullable=False, index=True)
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    event = relationship("Event", back_populates="participants")
