import os
import subprocess
import sys
from pathlib import Path

from sqlalchemy.engine import make_url


def _env_default(name: str, value: str) -> None:
    current = os.environ.get(name)
    if current is None or current.strip() == "":
        os.environ[name] = value


def _prepare_environment() -> None:
    _env_default("APP_PORT", "8000")
    _env_default("DATABASE_URL", "sqlite+pysqlite:////data/sports.db")
    _env_default("MEDIA_DIR", "/data/media")
    _env_default("STORAGE_BACKEND", "local")
    _env_default("AUTO_CREATE_ADMIN", "true")
    _env_default("BOOTSTRAP_ADMIN_NAME", "Admin")
    _env_default("BOOTSTRAP_ADMIN_EMAIL", "admin@example.com")
    _env_default("BOOTSTRAP_ADMIN_PASSWORD", "admin123")
    _env_default("PUBLIC_SCHEME", "http")
    _env_default("PUBLIC_HOST", "localhost")
    _env_default("SEED_DEMO_DATA", "false")

    if not os.environ.get("MEDIA_BASE_URL", "").strip():
        os.environ["MEDIA_BASE_URL"] = (
            f"{os.environ['PUBLIC_SCHEME']}://{os.environ['PUBLIC_HOST']}:{os.environ['APP_PORT']}/media"
        )


def _flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in {"1", "true", "yes", "on"}


def _ensure_storage_paths() -> None:
    Path(os.environ["MEDIA_DIR"]).mkdir(parents=True, exist_ok=True)

    try:
        parsed_url = make_url(os.environ["DATABASE_URL"])
    except Exception:
        return

    if not parsed_url.drivername.startswith("sqlite"):
        return

    db_path = parsed_url.database
    if not db_path or db_path == ":memory:":
        return

    Path(db_path).parent.mkdir(parents=True, exist_ok=True)


def _run(cmd: list[str]) -> None:
    print(">", " ".join(cmd), flush=True)
    subprocess.run(cmd, check=True)


def main() -> None:
    _prepare_environment()
    _ensure_storage_paths()

    print("Starting standalone sports admin backend with:", flush=True)
    print(f"  DATABASE_URL={os.environ['DATABASE_URL']}", flush=True)
    print(f"  MEDIA_DIR={os.environ['MEDIA_DIR']}", flush=True)
    print(f"  MEDIA_BASE_URL={os.environ['MEDIA_BASE_URL']}", flush=True)

    _run([sys.executable, "-m", "alembic", "upgrade", "head"])
    _run(
        [
            sys.executable,
            "scripts/seed_admin.py",
            "--name",
            os.environ["BOOTSTRAP_ADMIN_NAME"],
            "--email",
            os.environ["BOOTSTRAP_ADMIN_EMAIL"],
            "--password",
            os.environ["BOOTSTRAP_ADMIN_PASSWORD"],
        ]
    )
    if _flag("SEED_DEMO_DATA"):
        _run([sys.executable, "scripts/seed_demo_data.py", "--email", os.environ["BOOTSTRAP_ADMIN_EMAIL"]])

    os.execvp(
        "uvicorn",
        [
            "uvicorn",
            "sports_admin.main:app",
            "--host",
            "0.0.0.0",
            "--port",
            os.environ["APP_PORT"],
        ],
    )


if __name__ == "__main__":
    main()
