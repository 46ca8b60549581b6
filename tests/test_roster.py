import pytest

from sports_admin.core.errors import (
    CapacityExceeded,
    DuplicateParticipant,
    EnrollmentLimitExceeded,
    InvalidScore,
    NotFound,
    ValidationFailed,
)
from sports_admin.services.roster import MAX_SCORE, RosterEditor


class _ParticipantStub:
    def __init__(self, student_id: str, score: int = 0):
        self.student_id = student_id
        self.score = score


class _EventStub:
    def __init__(self, id: str, student_ids: list[str] = (), max_participants: int = 10, scores: dict | None = None):
        scores = scores or {}
        self.id = id
        self.max_participants = max_participants
        self.participants = [_ParticipantStub(student_id, scores.get(student_id, 0)) for student_id in student_ids]


def test_add_participant_starts_with_zero_score():
    event = _EventStub("e1")
    editor = RosterEditor(event, [event])

    entry = editor.add_participant("s1")

    assert entry.raw_score == "0"
    change = editor.build()
    assert [(item.student_id, item.score) for item in change.participants] == [("s1", 0)]


def test_add_to_full_event_fails():
    event = _EventStub("e1", ["s1", "s2"], max_participants=2)
    editor = RosterEditor(event, [event])

    with pytest.raises(CapacityExceeded):
        editor.add_participant("s3")
    assert editor.student_ids == ["s1", "s2"]


def test_fourth_event_is_rejected():
    others = [_EventStub(f"other-{index}", ["s1"]) for index in range(3)]
    event = _EventStub("e1")
    editor = RosterEditor(event, [*others, event])

    with pytest.raises(EnrollmentLimitExceeded):
        editor.add_participant("s1")
    assert editor.student_ids == []


def test_edited_event_does_not_count_towards_its_own_limit():
    others = [_EventStub(f"other-{index}", ["s1"]) for index in range(2)]
    event = _EventStub("e1", ["s1"])
    editor = RosterEditor(event, [*others, event])

    assert editor.enrollment_count("s1") == 2
    editor.remove_participant("s1")
    editor.add_participant("s1")
    assert editor.student_ids == ["s1"]


def test_enrollment_limit_is_configurable():
    event = _EventStub("e1")
    editor = RosterEditor(event, [_EventStub("other", ["s1"]), event], max_events_per_student=1)

    with pytest.raises(EnrollmentLimitExceeded):
        editor.add_participant("s1")


def test_duplicate_participant_is_rejected():
    event = _EventStub("e1", ["s1"])
    editor = RosterEditor(event, [event])

    with pytest.raises(DuplicateParticipant):
        editor.add_participant("s1")


def test_remove_then_readd_resets_score():
    event = _EventStub("e1", ["s1"], scores={"s1": 12})
    editor = RosterEditor(event, [event])

    assert editor.remove_participant("s1") is True
    editor.add_participant("s1")

    assert editor.build().participants[0].score == 0


def test_remove_non_participant_is_noop():
    event = _EventStub("e1", ["s1"])
    editor = RosterEditor(event, [event])

    assert editor.remove_participant("s9") is False
    assert editor.student_ids == ["s1"]


def test_invalid_score_blocks_commit():
    event = _EventStub("e1", ["s1", "s2"])
    editor = RosterEditor(event, [event])
    editor.set_score("s1", "15")

    with pytest.raises(InvalidScore):
        editor.set_score("s2", "12a")

    calls = []
    with pytest.raises(ValidationFailed) as exc_info:
        editor.commit(calls.append)

    assert calls == []
    assert exc_info.value.fields == ["s2"]
    assert event.participants[1].score == 0


def test_fixing_invalid_score_allows_commit():
    event = _EventStub("e1", ["s1"])
    editor = RosterEditor(event, [event])
    with pytest.raises(InvalidScore):
        editor.set_score("s1", "-3")
    editor.set_score("s1", "")

    change = editor.commit(lambda change: change)

    assert change.participants[0].score == 0
    assert change.event_id == "e1"


def test_removing_invalid_entry_clears_its_error():
    event = _EventStub("e1", ["s1"])
    editor = RosterEditor(event, [event])
    with pytest.raises(InvalidScore):
        editor.set_score("s1", "abc")

    editor.remove_participant("s1")

    assert editor.invalid_student_ids == []
    assert editor.build().participants == []


@pytest.mark.parametrize("raw_value", ["\u0661\u0662", "\uff13", "-1", "1.5", " 4"])
def test_score_must_be_ascii_digits(raw_value):
    event = _EventStub("e1", ["s1"])
    editor = RosterEditor(event, [event])

    with pytest.raises(InvalidScore):
        editor.set_score("s1", raw_value)

    with pytest.raises(ValidationFailed) as exc_info:
        editor.build()
    assert exc_info.value.fields == ["s1"]


def test_score_above_column_range_is_invalid():
    event = _EventStub("e1", ["s1"])
    editor = RosterEditor(event, [event])

    editor.set_score("s1", str(MAX_SCORE))
    assert editor.build().participants[0].score == MAX_SCORE

    with pytest.raises(InvalidScore):
        editor.set_score("s1", "99999999999999999999")
    with pytest.raises(ValidationFailed):
        editor.build()


def test_numeric_score_is_accepted():
    event = _EventStub("e1", ["s1"])
    editor = RosterEditor(event, [event])

    editor.set_score("s1", 12)

    assert editor.build().participants[0].score == 12


def test_set_score_for_unknown_participant():
    event = _EventStub("e1")
    editor = RosterEditor(event, [event])
    with pytest.raises(NotFound):
        editor.set_score("s1", "3")


def test_capacity_can_drop_below_current_count():
    event = _EventStub("e1", ["s1", "s2", "s3"])
    editor = RosterEditor(event, [event])

    editor.set_capacity(2)

    change = editor.build()
    assert change.max_participants == 2
    assert len(change.participants) == 3
    with pytest.raises(CapacityExceeded):
        editor.add_participant("s4")


@pytest.mark.parametrize("value", [0, -1, True])
def test_capacity_must_be_positive(value):
    event = _EventStub("e1")
    editor = RosterEditor(event, [event])
    with pytest.raises(ValidationFailed):
        editor.set_capacity(value)
    assert editor.max_participants == 10
