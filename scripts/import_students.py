import argparse
from pathlib import Path
import sys

from sqlalchemy import func, select

if __package__ is None or __package__ == "":
    sys.path.append(str(Path(__file__).resolve().parents[1]))

from sports_admin.core.config import get_settings
from sports_admin.db.session import get_session_factory
from sports_admin.models.admin import Admin
from sports_admin.models.student import Student
from sports_admin.services.bulk_import import apply_capacity, parse_student_csv


def parse_args() -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Import students from a FullName,Class,UID,Phone file.")
    parser.add_argument("--csv", required=True, help="Path to the CSV file")
    parser.add_argument("--email", default=settings.bootstrap_admin_email, help="Owning admin's email")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    csv_path = Path(args.csv)
    if not csv_path.exists():
        raise SystemExit(f"CSV file '{csv_path}' does not exist")

    plan = parse_student_csv(csv_path.read_text(encoding="utf-8"))
    session_factory = get_session_factory()
    with session_factory() as db:
        admin = db.scalar(select(Admin).where(Admin.email == args.email.strip().lower()))
        if not admin:
            raise SystemExit("Admin user not found. Run seed_admin first.")

        existing = db.scalar(select(func.count()).select_from(Student).where(Student.admin_id == admin.id)) or 0
        plan = apply_capacity(plan, existing, get_settings().student_capacity)
        taken = set(
            db.scalars(
                select(Student.uid).where(
                    Student.admin_id == admin.id, Student.uid.in_([row.uid for row in plan.students])
                )
            ).all()
        )

        inserted = 0
        for row in plan.students:
            if row.uid in taken:
                print(f"Skipping UID {row.uid}: already registered")
                continue
            db.add(Student(admin_id=admin.id, **row.as_payload()))
            taken.add(row.uid)
            inserted += 1
        db.commit()

    for skipped in plan.skipped:
        print(f"Skipped line {skipped.line_number}: {skipped.reason}")
    print(f"Inserted students: {inserted}; over capacity: {len(plan.over_capacity)}")


if __name__ == "__main__":
    main()
