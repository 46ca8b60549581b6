from __future__ import annotations

import argparse
from datetime import timedelta
from pathlib import Path
import sys

from sqlalchemy import delete, select

if __package__ is None or __package__ == "":
    sys.path.append(str(Path(__file__).resolve().parents[1]))

from sports_admin.core.config import get_settings
from sports_admin.db.session import get_session_factory
from sports_admin.models.admin import Admin
from sports_admin.models.common import utcnow
from sports_admin.models.enums import AGE_CATEGORIES, HOUSE_NAMES
from sports_admin.models.event import Event
from sports_admin.models.student import Student
from sports_admin.services.houses import ensure_houses


DEMO_STUDENTS = [
    ("Liam Smith", "10"),
    ("Olivia Johnson", "9"),
    ("Noah Williams", "12"),
    ("Emma Brown", "8"),
    ("Oliver Jones", "11"),
    ("Ava Garcia", "7"),
    ("Elijah Miller", "10"),
    ("Charlotte Davis", "9"),
    ("James Rodriguez", "12"),
    ("Sophia Martinez", "8"),
    ("William Hernandez", "11"),
    ("Isabella Lopez", "7"),
]

# name, type, status, max participants
DEMO_EVENTS = [
    ("100m Race", "Individual", "Completed", 50),
    ("Football", "Team", "Ongoing", 60),
    ("Long Jump", "Individual", "Upcoming", 50),
    ("Relay Race", "Team", "Upcoming", 50),
    ("Basketball", "Team", "Upcoming", 50),
    ("Volleyball", "Team", "Ongoing", 50),
    ("High Jump", "Individual", "Upcoming", 50),
    ("Shot Put", "Individual", "Completed", 50),
    ("Badminton", "Individual", "Upcoming", 50),
    ("Chess", "Individual", "Upcoming", 50),
]

# Demo rows are recognisable by their UID range, so reseeding replaces them.
DEMO_UID_OFFSET = 900000


def parse_args() -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Load demo students and events for an admin.")
    parser.add_argument("--email", default=settings.bootstrap_admin_email)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    session_factory = get_session_factory()

    with session_factory() as db:
        admin = db.scalar(select(Admin).where(Admin.email == args.email.strip().lower()))
        if not admin:
            raise RuntimeError("Admin user not found. Run seed_admin first.")

        demo_uids = [str(DEMO_UID_OFFSET + index) for index in range(len(DEMO_STUDENTS))]
        db.execute(delete(Student).where(Student.admin_id == admin.id, Student.uid.in_(demo_uids)))
        db.execute(
            delete(Event).where(Event.admin_id == admin.id, Event.name.in_([name for name, *_ in DEMO_EVENTS]))
        )

        now = utcnow()
        for index, (full_name, class_name) in enumerate(DEMO_STUDENTS):
            created_at = now - timedelta(days=index * 4)
            db.add(
                Student(
                    admin_id=admin.id,
                    full_name=full_name,
                    class_name=class_name,
                    uid=demo_uids[index],
                    phone=str(1234567890 + index * 1111111),
                    house=HOUSE_NAMES[index % len(HOUSE_NAMES)],
                    category=AGE_CATEGORIES[index % len(AGE_CATEGORIES)],
                    created_at=created_at,
                    updated_at=created_at,
                )
            )

        for name, event_type, status, max_participants in DEMO_EVENTS:
            db.add(
                Event(
                    admin_id=admin.id,
                    name=name,
                    type=event_type,
                    status=status,
                    max_participants=max_participants,
                    participants=[],
                )
            )

        db.commit()
        ensure_houses(db, admin.id)

    print(f"Demo data seeded: {len(DEMO_STUDENTS)} students and {len(DEMO_EVENTS)} events.")


if __name__ == "__main__":
    main()
