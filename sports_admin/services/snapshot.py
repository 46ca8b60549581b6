from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from sports_admin.models.event import Event
from sports_admin.models.student import Student


def load_students(db: Session, admin_id: str) -> list[Student]:
    return list(
        db.scalars(select(Student).where(Student.admin_id == admin_id).order_by(Student.full_name)).all()
    )


def load_events(db: Session, admin_id: str) -> list[Event]:
    stmt = (
        select(Event)
        .where(Event.admin_id == admin_id)
        .options(selectinload(Event.participants))
        .order_by(Event.created_at)
    )
    return list(db.scalars(stmt).all())
