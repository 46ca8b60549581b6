import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from sports_admin.client import EventRecord, Session, SportsApiClient, StudentRecord
from sports_admin.core.errors import (
    CapacityExceeded,
    Conflict,
    EnrollmentLimitExceeded,
    NotFound,
    Unauthorized,
    ValidationFailed,
)
from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD


@pytest.fixture()
def api(app_client: TestClient, tmp_path: Path) -> SportsApiClient:
    session = Session(tmp_path / "client" / "session.json").init()
    return SportsApiClient(session=session, http_client=app_client)


def _login(api: SportsApiClient) -> None:
    api.login(ADMIN_EMAIL, ADMIN_PASSWORD)


def test_health_endpoint_is_available_for_client(app_client: TestClient):
    response = app_client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload.get("status") == "ok"
    assert isinstance(payload.get("version"), str)


def test_login_persists_session(api: SportsApiClient):
    profile = api.login(ADMIN_EMAIL, ADMIN_PASSWORD)
    assert profile["email"] == ADMIN_EMAIL
    assert "token" not in profile

    stored = json.loads(api.session.path.read_text(encoding="utf-8"))
    assert stored["token"] == api.session.token
    assert stored["profile"]["email"] == ADMIN_EMAIL

    restored = Session(api.session.path).init()
    assert restored.is_authenticated
    assert restored.token == api.session.token

    api.logout()
    assert not api.session.is_authenticated
    assert not api.session.path.exists()


def test_bad_login_leaves_session_empty(api: SportsApiClient):
    with pytest.raises(Unauthorized):
        api.login(ADMIN_EMAIL, "wrong-password")
    assert not api.session.is_authenticated


def test_rejected_token_forces_logout(api: SportsApiClient):
    _login(api)
    api.refresh()
    api.session.set("expired-token")

    with pytest.raises(Unauthorized):
        api.list_students()

    assert not api.session.is_authenticated
    assert not api.session.path.exists()
    assert api.snapshot.events == []


def test_wrong_current_password_keeps_session(api: SportsApiClient):
    _login(api)
    with pytest.raises(ValidationFailed):
        api.change_password("not-it", "new-password")
    assert api.session.is_authenticated


def test_refresh_and_leaderboard(api: SportsApiClient):
    _login(api)
    red = api.create_student(
        full_name="Ria Red", class_name="7", uid="11", phone="1234567890", house="Red", category="U13"
    )
    blue = api.create_student(
        full_name="Ben Blue", class_name="7", uid="12", phone="1234567890", house="Blue", category="U13"
    )
    event = api.create_event("Relay", "Group", max_participants=4, status="Completed")
    api.update_event(
        event.id,
        participants=[{"student_id": red.id, "score": 10}, {"student_id": blue.id, "score": 3}],
    )
    api.set_initial_points("Red", 5)

    snapshot = api.refresh()
    assert {student.uid for student in snapshot.students} == {"11", "12"}
    assert [house.name for house in snapshot.houses] == ["Yellow", "Blue", "Green", "Red"]
    assert snapshot.initial_points["Red"] == 5

    board = api.leaderboard()
    assert board.houses[0].name == "Red"
    assert board.houses[0].total_points == 15
    assert board.students[0].student.id == red.id
    assert board.status_counts.completed == 1


def test_duplicate_student_is_conflict(api: SportsApiClient):
    _login(api)
    fields = {"full_name": "Ann Lee", "class_name": "4", "uid": "77", "phone": "1234567890", "house": "Green", "category": "U13"}
    api.create_student(**fields)
    with pytest.raises(Conflict):
        api.create_student(**fields)


def test_edit_and_commit_roster(api: SportsApiClient):
    _login(api)
    students = [
        api.create_student(
            full_name=f"Kid {uid}", class_name="6", uid=uid, phone="1234567890", house="Yellow", category="U13"
        )
        for uid in ("1", "2", "3")
    ]
    event = api.create_event("Sprint", "Individual", max_participants=2)
    api.refresh()

    editor = api.edit_roster(event.id)
    editor.add_participant(students[0].id)
    editor.add_participant(students[1].id)
    with pytest.raises(CapacityExceeded):
        editor.add_participant(students[2].id)

    editor.set_score(students[0].id, "9")
    saved = api.commit_roster(editor)

    assert isinstance(saved, EventRecord)
    assert [(item.student_id, item.score) for item in saved.participants] == [(students[0].id, 9), (students[1].id, 0)]
    assert api.snapshot.event(event.id).participants == saved.participants

    server_copy = next(item for item in api.list_events() if item.id == event.id)
    assert server_copy.participants == saved.participants


def test_invalid_score_commit_leaves_snapshot(api: SportsApiClient):
    _login(api)
    student = api.create_student(
        full_name="Kid One", class_name="6", uid="1", phone="1234567890", house="Yellow", category="U13"
    )
    event = api.create_event("Chess", "Individual", max_participants=2)
    api.refresh()

    editor = api.edit_roster(event.id)
    editor.add_participant(student.id)
    with pytest.raises(ValidationFailed):
        editor.set_score(student.id, "abc")
    with pytest.raises(ValidationFailed) as excinfo:
        api.commit_roster(editor)

    assert excinfo.value.fields == [student.id]
    assert api.snapshot.event(event.id).participants == []


def test_enrollment_limit_counts_snapshot_events(api: SportsApiClient):
    _login(api)
    student = api.create_student(
        full_name="Busy Kid", class_name="8", uid="5", phone="1234567890", house="Green", category="U16"
    )
    events = [api.create_event(f"Event {index}", "Individual", max_participants=5) for index in range(4)]
    for event in events[:3]:
        api.update_event(event.id, participants=[{"student_id": student.id, "score": 0}])
    api.refresh()

    editor = api.edit_roster(events[3].id)
    with pytest.raises(EnrollmentLimitExceeded):
        editor.add_participant(student.id)

    # Editing one of the student's own events does not count that event.
    own = api.edit_roster(events[0].id)
    own.remove_participant(student.id)
    own.add_participant(student.id)


def test_unknown_event_in_snapshot(api: SportsApiClient):
    _login(api)
    api.refresh()
    with pytest.raises(NotFound):
        api.edit_roster("missing")


def test_import_students_csv(api: SportsApiClient):
    _login(api)
    api.refresh()
    text = "\n".join(
        [
            "John Doe,10,101,1234567890",
            "John123,10,102,1234567890",
            "",
            "Jane Roe,3,103,0987654321",
        ]
    )

    result = api.import_students_csv(text)

    assert [student.uid for student in result.created] == ["101", "103"]
    assert all(isinstance(student, StudentRecord) for student in result.created)
    assert [(student.house, student.category) for student in result.created] == [("Yellow", "U13"), ("Blue", "U16")]
    assert [line.line_number for line in result.skipped] == [2]
    assert result.over_capacity == 0
    assert len(api.snapshot.students) == 2


def test_import_without_valid_rows(api: SportsApiClient):
    _login(api)
    with pytest.raises(ValidationFailed):
        api.import_students_csv("Bad1,1,1,1\n")


def test_participant_records_accept_legacy_id_spelling():
    event = EventRecord.model_validate(
        {
            "_id": "e1",
            "name": "Relay",
            "type": "Group",
            "status": "Upcoming",
            "max_participants": 4,
            "participants": [{"student_id": {"_id": "s1", "full_name": "Kid"}, "score": 3}],
        }
    )
    assert event.id == "e1"
    assert event.participants[0].student_id == "s1"


def test_corrupt_session_file_counts_as_logged_out(tmp_path: Path):
    path = tmp_path / "session.json"
    path.write_text("{not json", encoding="utf-8")

    session = Session(path).init()

    assert not session.is_authenticated
    session.set("abc", {"name": "Coach"})
    assert Session(path).init().profile == {"name": "Coach"}
    session.clear()
    session.clear()
    assert not path.exists()
