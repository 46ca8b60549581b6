"""Validation and editing of a single event's participant list.

A :class:`RosterEditor` holds the pending state of one event while an admin
edits it. Scores are kept as the raw strings typed in so that an invalid entry
can be reported and corrected; nothing is converted or written until
:meth:`RosterEditor.commit`, which is all-or-nothing.
"""

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TypeVar

from sports_admin.core.errors import (
    CapacityExceeded,
    DuplicateParticipant,
    EnrollmentLimitExceeded,
    InvalidScore,
    NotFound,
    ValidationFailed,
)
from sports_admin.services.points import EventLike

logger = logging.getLogger(__name__)

MAX_EVENTS_PER_STUDENT = 3
SCORE_PATTERN = re.compile(r"[0-9]*")
MAX_SCORE = 2**31 - 1

T = TypeVar("T")


def _is_valid_score(raw_value: str) -> bool:
    # Digits only; empty means 0. Must fit the INTEGER score column.
    if SCORE_PATTERN.fullmatch(raw_value) is None:
        return False
    digits = raw_value.lstrip("0")
    return len(digits) <= len(str(MAX_SCORE)) and int(digits or "0") <= MAX_SCORE


@dataclass
class RosterEntry:
    student_id: str
    raw_score: str = "0"
    invalid: bool = False


@dataclass(frozen=True)
class ParticipantScore:
    student_id: str
    score: int


@dataclass(frozen=True)
class RosterChange:
    event_id: str
    max_participants: int
    participants: list[ParticipantScore]


class RosterEditor:
    def __init__(
        self,
        event: EventLike,
        events: Iterable[EventLike] = (),
        *,
        max_events_per_student: int = MAX_EVENTS_PER_STUDENT,
    ) -> None:
        self.event_id = event.id
        self.max_participants: int = event.max_participants
        self.max_events_per_student = max_events_per_student
        self._entries: list[RosterEntry] = [
            RosterEntry(student_id=participant.student_id, raw_score=str(participant.score))
            for participant in event.participants
        ]
        # The event being edited never counts towards its own enrollment limit.
        self._other_events = [other for other in events if other.id != event.id]

    @property
    def entries(self) -> list[RosterEntry]:
        return list(self._entries)

    @property
    def student_ids(self) -> list[str]:
        return [entry.student_id for entry in self._entries]

    @property
    def is_full(self) -> bool:
        return len(self._entries) >= self.max_participants

    @property
    def vacancies(self) -> int:
        return self.max_participants - len(self._entries)

    @property
    def invalid_student_ids(self) -> list[str]:
        return [entry.student_id for entry in self._entries if entry.invalid]

    def _find(self, student_id: str) -> RosterEntry | None:
        for entry in self._entries:
            if entry.student_id == student_id:
                return entry
        return None

    def enrollment_count(self, student_id: str) -> int:
        """Number of other events the student already takes part in."""
        return sum(
            1
            for other in self._other_events
            if any(participant.student_id == student_id for participant in other.participants)
        )

    def add_participant(self, student_id: str) -> RosterEntry:
        if self._find(student_id) is not None:
            raise DuplicateParticipant(f"Student {student_id} is already a participant")

        if self.is_full:
            logger.info("Rejected %s for event %s: event is full", student_id, self.event_id)
            raise CapacityExceeded(
                f"Event is full ({len(self._entries)} / {self.max_participants} filled)"
            )

        enrolled = self.enrollment_count(student_id)
        if enrolled >= self.max_events_per_student:
            logger.info(
                "Rejected %s for event %s: already enrolled in %d events", student_id, self.event_id, enrolled
            )
            raise EnrollmentLimitExceeded(
                f"Student is already enrolled in the maximum limit of {self.max_events_per_student} events"
            )

        entry = RosterEntry(student_id=student_id)
        self._entries.append(entry)
        return entry

    def remove_participant(self, student_id: str) -> bool:
        """Drop the participant and any pending score input; a non-participant is a no-op."""
        entry = self._find(student_id)
        if entry is None:
            return False
        self._entries.remove(entry)
        return True

    def set_score(self, student_id: str, raw_value: str | int | None) -> None:
        entry = self._find(student_id)
        if entry is None:
            raise NotFound(f"Student {student_id} is not a participant")

        raw_value = "" if raw_value is None else str(raw_value)
        entry.raw_score = raw_value
        entry.invalid = not _is_valid_score(raw_value)
        if entry.invalid:
            raise InvalidScore("Scores must be whole numbers", fields=[student_id])

    def set_capacity(self, new_max: int) -> None:
        # Lowering below the current count is allowed; it only blocks further additions.
        if isinstance(new_max, bool) or not isinstance(new_max, int) or new_max < 1:
            raise ValidationFailed("Maximum participants must be at least 1", fields=["max_participants"])
        self.max_participants = new_max

    def build(self) -> RosterChange:
        invalid = self.invalid_student_ids
        if invalid:
            raise ValidationFailed(
                "Please fix the errors in the scores. Scores must be whole numbers.",
                fields=invalid,
            )
        return RosterChange(
            event_id=self.event_id,
            max_participants=self.max_participants,
            participants=[
                ParticipantScore(student_id=entry.student_id, score=int(entry.raw_score.lstrip("0") or "0"))
                for entry in self._entries
            ],
        )

    def commit(self, persist: Callable[[RosterChange], T]) -> T:
        """Validate every entry, then hand the whole change to ``persist`` in one call."""
        change = self.build()
        return persist(change)
