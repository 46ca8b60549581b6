import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sports_admin.models.enums import HOUSE_NAMES
from sports_admin.models.house import House

logger = logging.getLogger(__name__)


def _load_houses(db: Session, admin_id: str) -> dict[str, House]:
    rows = db.scalars(select(House).where(House.admin_id == admin_id)).all()
    return {house.name: house for house in rows}


def ensure_houses(db: Session, admin_id: str) -> list[House]:
    """Return the admin's four houses in display order, creating missing rows."""
    by_name = _load_houses(db, admin_id)

    missing = [name for name in HOUSE_NAMES if name not in by_name]
    if missing:
        for name in missing:
            db.add(House(admin_id=admin_id, name=name, initial_points=0))
        try:
            db.commit()
        except IntegrityError:
            # Another request created them first.
            db.rollback()
            logger.info("Houses for admin %s were created concurrently", admin_id)
        else:
            logger.info("Created houses %s for admin %s", ", ".join(missing), admin_id)
        by_name = _load_houses(db, admin_id)

    return [by_name[name] for name in HOUSE_NAMES]


def initial_points_map(houses: list[House]) -> dict[str, int]:
    return {house.name: house.initial_points for house in houses}
