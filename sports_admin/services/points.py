"""House and student point aggregation.

Everything here is a pure function over in-memory snapshots: ORM rows, API
schemas and plain test stubs all work as long as they expose the attributes
named in the protocols below.

House membership is resolved from each student's *current* ``house`` when the
aggregation runs, not from the house they belonged to when the score was
recorded. A student who changes house takes their event points along.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from sports_admin.models.enums import EVENT_STATUSES, HOUSE_NAMES, EventStatus


class StudentLike(Protocol):
    id: str
    house: Any


class ParticipantLike(Protocol):
    student_id: str
    score: int


class EventLike(Protocol):
    id: str
    status: Any
    participants: Sequence[ParticipantLike]


@dataclass(frozen=True)
class HouseStanding:
    name: str
    initial_points: int
    event_points: int

    @property
    def total_points(self) -> int:
        return self.initial_points + self.event_points


@dataclass(frozen=True)
class StudentStanding:
    student_id: str
    student: Any
    score: int
    events_count: int


@dataclass(frozen=True)
class EventStatusCounts:
    total: int
    upcoming: int
    ongoing: int
    completed: int


@dataclass(frozen=True)
class Leaderboard:
    houses: list[HouseStanding]
    students: list[StudentStanding]
    status_counts: EventStatusCounts


@dataclass(frozen=True)
class ReportEntry:
    event_id: str
    event_name: str
    event_type: str
    score: int


@dataclass(frozen=True)
class StudentReport:
    student_id: str
    entries: list[ReportEntry] = field(default_factory=list)

    @property
    def total_points(self) -> int:
        return sum(entry.score for entry in self.entries)

    @property
    def events_count(self) -> int:
        return len(self.entries)

    @property
    def average_score(self) -> float | None:
        if not self.entries:
            return None
        return round(self.total_points / len(self.entries), 2)


@dataclass(frozen=True)
class HouseMember:
    student: Any
    event_names: list[str]
    score: int


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def house_event_points(students: Iterable[StudentLike], events: Iterable[EventLike]) -> dict[str, int]:
    """Sum participant scores per house; dangling student references contribute nothing."""
    house_by_student = {student.id: _plain(student.house) for student in students}
    points = {name: 0 for name in HOUSE_NAMES}
    for event in events:
        for participant in event.participants:
            house = house_by_student.get(participant.student_id)
            if house in points:
                points[house] += participant.score
    return points


def aggregate_house_points(
    students: Iterable[StudentLike],
    events: Iterable[EventLike],
    initial_points: Mapping[Any, int],
) -> list[HouseStanding]:
    """Return the four houses ranked by total points, ties kept in house order."""
    baselines = {_plain(name): value for name, value in initial_points.items()}
    event_points = house_event_points(students, events)
    standings = [
        HouseStanding(name=name, initial_points=baselines.get(name, 0), event_points=event_points[name])
        for name in HOUSE_NAMES
    ]
    return sorted(standings, key=lambda item: item.total_points, reverse=True)


def aggregate_student_points(
    students: Iterable[StudentLike],
    events: Iterable[EventLike],
) -> list[StudentStanding]:
    """Return every student with their summed score, ranked descending (stable for ties)."""
    students = list(students)
    known_ids = {student.id for student in students}
    scores: dict[str, int] = {student_id: 0 for student_id in known_ids}
    counts: dict[str, int] = {student_id: 0 for student_id in known_ids}
    for event in events:
        for participant in event.participants:
            if participant.student_id in known_ids:
                scores[participant.student_id] += participant.score
                counts[participant.student_id] += 1

    standings = [
        StudentStanding(
            student_id=student.id,
            student=student,
            score=scores[student.id],
            events_count=counts[student.id],
        )
        for student in students
    ]
    return sorted(standings, key=lambda item: item.score, reverse=True)


def count_event_statuses(events: Iterable[EventLike]) -> EventStatusCounts:
    events = list(events)
    completed = 0
    ongoing = 0
    for event in events:
        status = _plain(event.status)
        if status not in EVENT_STATUSES:
            raise ValueError(f"Unknown event status: {status!r}")
        if status == EventStatus.COMPLETED.value:
            completed += 1
        elif status == EventStatus.ONGOING.value:
            ongoing += 1
    return EventStatusCounts(
        total=len(events),
        upcoming=len(events) - completed - ongoing,
        ongoing=ongoing,
        completed=completed,
    )


def build_leaderboard(
    students: Iterable[StudentLike],
    events: Iterable[EventLike],
    initial_points: Mapping[Any, int],
) -> Leaderboard:
    students = list(students)
    events = list(events)
    return Leaderboard(
        houses=aggregate_house_points(students, events, initial_points),
        students=aggregate_student_points(students, events),
        status_counts=count_event_statuses(events),
    )


def filter_student_standings(
    standings: Iterable[StudentStanding],
    *,
    house: str | None = None,
    category: str | None = None,
    class_name: str | None = None,
) -> list[StudentStanding]:
    result = []
    for standing in standings:
        student = standing.student
        if house and _plain(student.house) != _plain(house):
            continue
        if category and _plain(student.category) != _plain(category):
            continue
        if class_name and student.class_name != class_name:
            continue
        result.append(standing)
    return result


def student_report(student_id: str, events: Iterable[EventLike]) -> StudentReport:
    entries = []
    for event in events:
        for participant in event.participants:
            if participant.student_id == student_id:
                entries.append(
                    ReportEntry(
                        event_id=event.id,
                        event_name=event.name,
                        event_type=_plain(event.type),
                        score=participant.score,
                    )
                )
                break
    return StudentReport(student_id=student_id, entries=entries)


def house_roster(house: str, students: Iterable[StudentLike], events: Iterable[EventLike]) -> list[HouseMember]:
    """Students of one house sorted by name, with the events each takes part in."""
    house = _plain(house)
    members = sorted(
        (student for student in students if _plain(student.house) == house),
        key=lambda student: student.full_name.lower(),
    )
    event_names: dict[str, list[str]] = {student.id: [] for student in members}
    scores: dict[str, int] = {student.id: 0 for student in members}
    for event in events:
        for participant in event.participants:
            if participant.student_id in event_names:
                event_names[participant.student_id].append(event.name)
                scores[participant.student_id] += participant.score
    return [
        HouseMember(student=student, event_names=event_names[student.id], score=scores[student.id])
        for student in members
    ]
