"""Synchronous client for the sports admin API.

The client keeps an in-memory :class:`Snapshot` of the admin's students,
events and houses. It is filled by :meth:`SportsApiClient.refresh` and is
only changed after the API has confirmed a write, so a failed call never
leaves it half-updated. There is no background polling.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from sports_admin.client.records import EventRecord, HouseRecord, StudentRecord
from sports_admin.client.session import Session, get_session
from sports_admin.core.config import get_settings
from sports_admin.core.errors import (
    CapacityExceeded,
    Conflict,
    DuplicateParticipant,
    EnrollmentLimitExceeded,
    InvalidScore,
    NotFound,
    SportsAdminError,
    Unauthorized,
    ValidationFailed,
)
from sports_admin.services.bulk_import import SkippedLine, apply_capacity, parse_student_csv
from sports_admin.services.points import Leaderboard, build_leaderboard
from sports_admin.services.roster import RosterChange, RosterEditor

logger = logging.getLogger(__name__)

_ERRORS_BY_CODE: dict[str, type[SportsAdminError]] = {
    error.code: error
    for error in (
        ValidationFailed,
        InvalidScore,
        CapacityExceeded,
        EnrollmentLimitExceeded,
        DuplicateParticipant,
        NotFound,
        Conflict,
        Unauthorized,
    )
}
_CONFLICT_MARKERS = ("already exist", "already in use")


@dataclass
class Snapshot:
    students: list[StudentRecord] = field(default_factory=list)
    events: list[EventRecord] = field(default_factory=list)
    houses: list[HouseRecord] = field(default_factory=list)

    @property
    def initial_points(self) -> dict[str, int]:
        return {house.name: house.initial_points for house in self.houses}

    def event(self, event_id: str) -> EventRecord:
        for event in self.events:
            if event.id == event_id:
                return event
        raise NotFound(f"Event {event_id} is not in the current snapshot")

    def replace_event(self, updated: EventRecord) -> None:
        self.events = [updated if event.id == updated.id else event for event in self.events]


@dataclass
class BulkImportResult:
    created: list[StudentRecord]
    skipped: list[SkippedLine]
    over_capacity: int


def _error_from_response(response: httpx.Response) -> SportsAdminError:
    try:
        body = response.json()
    except ValueError:
        body = response.text
    detail = body.get("detail", body) if isinstance(body, dict) else body

    if isinstance(detail, dict):
        error_class = _ERRORS_BY_CODE.get(detail.get("error", ""), SportsAdminError)
        message = detail.get("message") or str(detail)
        if issubclass(error_class, ValidationFailed):
            return error_class(message, fields=detail.get("fields"))
        return error_class(message)

    message = detail if isinstance(detail, str) else str(detail)
    if response.status_code == 404:
        return NotFound(message)
    if response.status_code == 409:
        return Conflict(message)
    if response.status_code == 400 and any(marker in message.lower() for marker in _CONFLICT_MARKERS):
        return Conflict(message)
    if response.status_code in (400, 422):
        return ValidationFailed(message)
    return SportsAdminError(message)


class SportsApiClient:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        session: Session | None = None,
        http_client: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.settings = get_settings()
        self.session = session if session is not None else get_session()
        self._http = http_client or httpx.Client(base_url=base_url or self.settings.api_base_url, timeout=timeout)
        self.snapshot = Snapshot()

    def __enter__(self) -> "SportsApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = dict(kwargs.pop("headers", None) or {})
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"

        response = self._http.request(method, path, headers=headers, **kwargs)
        if response.status_code == 401:
            if self.session.is_authenticated:
                logger.warning("API rejected the session token, logging out")
            self.session.clear()
            self.snapshot = Snapshot()
            raise Unauthorized(_error_from_response(response).message)
        if response.is_error:
            raise _error_from_response(response)
        if not response.content:
            return None
        return response.json()

    # auth

    def _start_session(self, data: dict[str, Any]) -> dict[str, Any]:
        token = data.pop("token")
        self.session.set(token, data)
        return data

    def register(self, name: str, email: str, password: str) -> dict[str, Any]:
        data = self._request("POST", "/auth/register", json={"name": name, "email": email, "password": password})
        return self._start_session(data)

    def login(self, email: str, password: str) -> dict[str, Any]:
        data = self._request("POST", "/auth/login", json={"email": email, "password": password})
        return self._start_session(data)

    def logout(self) -> None:
        self.session.clear()
        self.snapshot = Snapshot()

    def profile(self) -> dict[str, Any]:
        return self._request("GET", "/auth/profile")

    def update_profile(self, **fields: Any) -> dict[str, Any]:
        data = self._request("PUT", "/auth/profile", json=fields)
        return self._start_session(data)

    def change_password(self, current_password: str, new_password: str) -> str:
        data = self._request(
            "POST",
            "/auth/changepassword",
            json={"current_password": current_password, "new_password": new_password},
        )
        return data["message"]

    # students

    def list_students(self) -> list[StudentRecord]:
        return [StudentRecord.model_validate(item) for item in self._request("GET", "/students")]

    def create_student(self, **fields: Any) -> StudentRecord:
        student = StudentRecord.model_validate(self._request("POST", "/students", json=fields))
        self.snapshot.students.append(student)
        return student

    def update_student(self, student_id: str, **fields: Any) -> StudentRecord:
        student = StudentRecord.model_validate(self._request("PUT", f"/students/{student_id}", json=fields))
        self.snapshot.students = [student if item.id == student.id else item for item in self.snapshot.students]
        return student

    def delete_student(self, student_id: str) -> None:
        self._request("DELETE", f"/students/{student_id}")
        self.snapshot.students = [item for item in self.snapshot.students if item.id != student_id]

    def delete_students(self, student_ids: list[str]) -> list[str]:
        data = self._request("DELETE", "/students/bulk", json={"ids": student_ids})
        deleted = set(data["deleted_ids"])
        self.snapshot.students = [item for item in self.snapshot.students if item.id not in deleted]
        return data["deleted_ids"]

    def import_students_csv(self, text: str) -> BulkImportResult:
        """Register every valid ``FullName,Class,UID,Phone`` line; invalid lines are dropped."""
        plan = parse_student_csv(text)
        if not plan.students:
            raise ValidationFailed("No valid student data found")

        plan = apply_capacity(plan, len(self.snapshot.students), self.settings.student_capacity)
        if not plan.students:
            raise ValidationFailed(f"Student capacity of {self.settings.student_capacity} has been reached")

        data = self._request("POST", "/students/bulk", json={"students": [row.as_payload() for row in plan.students]})
        created = [StudentRecord.model_validate(item) for item in data["created"]]
        self.snapshot.students.extend(created)
        return BulkImportResult(
            created=created,
            skipped=plan.skipped,
            over_capacity=len(plan.over_capacity) + data["rejected_count"],
        )

    # events

    def list_events(self) -> list[EventRecord]:
        return [EventRecord.model_validate(item) for item in self._request("GET", "/events")]

    def create_event(self, name: str, type: str, max_participants: int, status: str = "Upcoming") -> EventRecord:
        payload = {"name": name, "type": type, "status": status, "max_participants": max_participants}
        event = EventRecord.model_validate(self._request("POST", "/events", json=payload))
        self.snapshot.events.append(event)
        return event

    def update_event(self, event_id: str, **fields: Any) -> EventRecord:
        event = EventRecord.model_validate(self._request("PUT", f"/events/{event_id}", json=fields))
        self.snapshot.replace_event(event)
        return event

    def delete_event(self, event_id: str) -> None:
        self._request("DELETE", f"/events/{event_id}")
        self.snapshot.events = [item for item in self.snapshot.events if item.id != event_id]

    # houses

    def list_houses(self) -> list[HouseRecord]:
        return [HouseRecord.model_validate(item) for item in self._request("GET", "/houses")]

    def set_initial_points(self, house: str, initial_points: int) -> HouseRecord:
        updated = HouseRecord.model_validate(
            self._request("PUT", f"/houses/{house}", json={"initial_points": initial_points})
        )
        self.snapshot.houses = [updated if item.name == updated.name else item for item in self.snapshot.houses]
        return updated

    # snapshot and derived views

    def refresh(self) -> Snapshot:
        """Fetch students, events and houses; the previous snapshot survives a failed fetch."""
        snapshot = Snapshot(
            students=self.list_students(),
            events=self.list_events(),
            houses=self.list_houses(),
        )
        self.snapshot = snapshot
        return snapshot

    def leaderboard(self) -> Leaderboard:
        return build_leaderboard(self.snapshot.students, self.snapshot.events, self.snapshot.initial_points)

    def edit_roster(self, event_id: str) -> RosterEditor:
        return RosterEditor(
            self.snapshot.event(event_id),
            self.snapshot.events,
            max_events_per_student=self.settings.max_events_per_student,
        )

    def commit_roster(self, editor: RosterEditor) -> EventRecord:
        def persist(change: RosterChange) -> EventRecord:
            payload = {
                "max_participants": change.max_participants,
                "participants": [
                    {"student_id": item.student_id, "score": item.score} for item in change.participants
                ],
            }
            return EventRecord.model_validate(self._request("PUT", f"/events/{change.event_id}", json=payload))

        event = editor.commit(persist)
        self.snapshot.replace_event(event)
        return event
