from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sports_admin.db.base import Base
from sports_admin.models.common import TimestampMixin, UUIDPrimaryKeyMixin


class Admin(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "admins"

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(512), nullable=False)
    profile_picture_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    students = relationship("Student", back_populates="admin", cascade="all, delete-orphan")
    events = relationship("Event", back_populates="admin", cascade="all, delete-orphan")
    houses = relationship("House", back_populates="admin", cascade="all, delete-orphan")
