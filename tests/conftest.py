from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin123"


@pytest.fixture()
def app_client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    db_file = tmp_path / "test.db"
    media_dir = tmp_path / "media"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_file.as_posix()}")
    monkeypatch.setenv("STORAGE_BACKEND", "local")
    monkeypatch.setenv("MEDIA_DIR", str(media_dir))
    monkeypatch.setenv("MEDIA_BASE_URL", "http://testserver/media")
    monkeypatch.setenv("AUTO_CREATE_ADMIN", "true")
    monkeypatch.setenv("BOOTSTRAP_ADMIN_EMAIL", ADMIN_EMAIL)
    monkeypatch.setenv("BOOTSTRAP_ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.setenv("SESSION_FILE", str(tmp_path / "session.json"))

    from sports_admin.core.config import clear_settings_cache
    from sports_admin.db.base import Base
    from sports_admin.db.session import get_engine, reset_engine
    from sports_admin.main import create_app
    from sports_admin import models  # noqa: F401

    clear_settings_cache()
    reset_engine()
    Base.metadata.create_all(bind=get_engine())

    app = create_app()
    with TestClient(app) as client:
        yield client

    Base.metadata.drop_all(bind=get_engine())
    reset_engine()
    clear_settings_cache()


def auth_headers(client: TestClient, email: str = ADMIN_EMAIL, password: str = ADMIN_PASSWORD) -> dict[str, str]:
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    token = response.json()["token"]
    return {"Authorization": f"Bearer {token}"}


def register_admin(client: TestClient, email: str, password: str = "secret123", name: str = "Coach") -> dict[str, str]:
    response = client.post("/auth/register", json={"name": name, "email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


def create_student(client: TestClient, headers: dict[str, str], uid: str, house: str = "Red", **overrides) -> dict:
    payload = {
        "full_name": f"Student {uid}",
        "class_name": "10",
        "uid": uid,
        "phone": "1234567890",
        "house": house,
        "category": "U16",
    }
    payload.update(overrides)
    response = client.post("/students", headers=headers, json=payload)
    assert response.status_code == 200, response.text
    return response.json()


def create_event(client: TestClient, headers: dict[str, str], name: str, max_participants: int = 10, **overrides) -> dict:
    payload = {"name": name, "type": "Individual", "status": "Upcoming", "max_participants": max_participants}
    payload.update(overrides)
    response = client.post("/events", headers=headers, json=payload)
    assert response.status_code == 200, response.text
    return response.json()
