from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sports_admin.db.base import Base
from sports_admin.models.common import EntityId, TimestampMixin, UUIDPrimaryKeyMixin


class House(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "houses"
    __table_args__ = (UniqueConstraint("admin_id", "name", name="uq_houses_admin_name"),)

    admin_id: Mapped[EntityId] = mapped_column(
        String(36), ForeignKey("admins.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(16), nullable=False)
    initial_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    admin = relationship("Admin", back_populates="houses")
