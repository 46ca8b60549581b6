import argparse
from pathlib import Path
import sys

from sqlalchemy import select

if __package__ is None or __package__ == "":
    sys.path.append(str(Path(__file__).resolve().parents[1]))

from sports_admin.core.config import get_settings
from sports_admin.core.security import hash_password
from sports_admin.db.session import get_session_factory
from sports_admin.models.admin import Admin
from sports_admin.services.houses import ensure_houses


def parse_args() -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Create or update an admin account.")
    parser.add_argument("--name", default=settings.bootstrap_admin_name)
    parser.add_argument("--email", default=settings.bootstrap_admin_email)
    parser.add_argument("--password", default=settings.bootstrap_admin_password)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    email = args.email.strip().lower()
    session_factory = get_session_factory()
    with session_factory() as db:
        admin = db.scalar(select(Admin).where(Admin.email == email))
        if admin:
            admin.password_hash = hash_password(args.password)
            action = "updated"
        else:
            admin = Admin(name=args.name, email=email, password_hash=hash_password(args.password))
            action = "created"
        db.add(admin)
        db.commit()
        ensure_houses(db, admin.id)
    print(f"Admin {email} {action}.")


if __name__ == "__main__":
    main()
