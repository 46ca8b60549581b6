import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from sports_admin.api.deps import get_current_admin, get_owned_or_404, http_error
from sports_admin.core.config import get_settings
from sports_admin.core.errors import InvalidScore, SportsAdminError
from sports_admin.db.session import get_db
from sports_admin.models.admin import Admin
from sports_admin.models.event import Event, EventParticipant
from sports_admin.models.student import Student
from sports_admin.schemas.events import (
    EventCreateRequest,
    EventOut,
    EventUpdateRequest,
    ParticipantAddRequest,
    ParticipantOut,
    RosterUpdateRequest,
)
from sports_admin.schemas.students import DeleteResponse
from sports_admin.services.roster import RosterChange, RosterEditor
from sports_admin.services.snapshot import load_events

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])


def _student_names(db: Session, admin_id: str) -> dict[str, str]:
    rows = db.execute(select(Student.id, Student.full_name).where(Student.admin_id == admin_id)).all()
    return {student_id: full_name for student_id, full_name in rows}


def _event_out(event: Event, names: dict[str, str]) -> EventOut:
    return EventOut(
        id=event.id,
        name=event.name,
        type=event.type,
        status=event.status,
        max_participants=event.max_participants,
        participants=[
            ParticipantOut(
                student_id=participant.student_id,
                score=participant.score,
                student_name=names.get(participant.student_id),
            )
            for participant in event.participants
        ],
        created_at=event.created_at,
        updated_at=event.updated_at,
    )


def _replace_participants(event: Event, scores: list[tuple[str, int]]) -> None:
    existing = {participant.student_id: participant for participant in event.participants}
    participants = []
    for position, (student_id, score) in enumerate(scores):
        participant = existing.get(student_id) or EventParticipant(student_id=student_id)
        participant.score = score
        participant.position = position
        participants.append(participant)
    event.participants = participants


def _roster_editor(db: Session, event: Event, admin: Admin) -> RosterEditor:
    return RosterEditor(
        event,
        load_events(db, admin.id),
        max_events_per_student=get_settings().max_events_per_student,
    )


def _commit_roster(db: Session, event: Event, editor: RosterEditor) -> Event:
    def persist(change: RosterChange) -> Event:
        event.max_participants = change.max_participants
        _replace_participants(event, [(item.student_id, item.score) for item in change.participants])
        db.add(event)
        db.commit()
        db.refresh(event)
        return event

    try:
        return editor.commit(persist)
    except SportsAdminError as exc:
        logger.info("Roster save for event %s rejected: %s", event.id, exc.message)
        raise http_error(exc) from exc


@router.get("", response_model=list[EventOut])
def list_events(db: Session = Depends(get_db), admin: Admin = Depends(get_current_admin)):
    names = _student_names(db, admin.id)
    return [_event_out(event, names) for event in load_events(db, admin.id)]


@router.post("", response_model=EventOut)
def create_event(
    payload: EventCreateRequest,
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    event = Event(
        admin_id=admin.id,
        name=payload.name,
        type=payload.type,
        status=payload.status,
        max_participants=payload.max_participants,
        participants=[],
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return _event_out(event, {})


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: str, db: Session = Depends(get_db), admin: Admin = Depends(get_current_admin)):
    event = get_owned_or_404(db, Event, event_id, admin, "Event not found")
    return _event_out(event, _student_names(db, admin.id))


@router.put("/{event_id}", response_model=EventOut)
def update_event(
    event_id: str,
    payload: EventUpdateRequest,
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    event = get_owned_or_404(db, Event, event_id, admin, "Event not found")

    if payload.name is not None:
        event.name = payload.name
    if payload.type is not None:
        event.type = payload.type
    if payload.status is not None:
        event.status = payload.status
    if payload.max_participants is not None:
        event.max_participants = payload.max_participants
    if payload.participants is not None:
        # Stored as sent: capacity is checked when the roster is edited, not here.
        _replace_participants(event, [(item.student_id, item.score) for item in payload.participants])

    db.add(event)
    db.commit()
    db.refresh(event)
    return _event_out(event, _student_names(db, admin.id))


@router.delete("/{event_id}", response_model=DeleteResponse)
def delete_event(event_id: str, db: Session = Depends(get_db), admin: Admin = Depends(get_current_admin)):
    event = get_owned_or_404(db, Event, event_id, admin, "Event not found")
    db.delete(event)
    db.commit()
    return DeleteResponse(id=event_id, message="Event removed")


@router.post("/{event_id}/participants", response_model=EventOut)
def add_participant(
    event_id: str,
    payload: ParticipantAddRequest,
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    event = get_owned_or_404(db, Event, event_id, admin, "Event not found")
    get_owned_or_404(db, Student, payload.student_id, admin, "Student not found")

    editor = _roster_editor(db, event, admin)
    try:
        editor.add_participant(payload.student_id)
    except SportsAdminError as exc:
        raise http_error(exc) from exc

    event = _commit_roster(db, event, editor)
    return _event_out(event, _student_names(db, admin.id))


@router.delete("/{event_id}/participants/{student_id}", response_model=EventOut)
def remove_participant(
    event_id: str,
    student_id: str,
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    event = get_owned_or_404(db, Event, event_id, admin, "Event not found")
    editor = _roster_editor(db, event, admin)
    if editor.remove_participant(student_id):
        event = _commit_roster(db, event, editor)
    return _event_out(event, _student_names(db, admin.id))


@router.put("/{event_id}/roster", response_model=EventOut)
def update_roster(
    event_id: str,
    payload: RosterUpdateRequest,
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    event = get_owned_or_404(db, Event, event_id, admin, "Event not found")
    editor = _roster_editor(db, event, admin)
    try:
        if payload.max_participants is not None:
            editor.set_capacity(payload.max_participants)
        for student_id, raw_score in payload.scores.items():
            try:
                editor.set_score(student_id, raw_score)
            except InvalidScore:
                # Reported together with every other invalid score by the commit below.
                continue
    except SportsAdminError as exc:
        raise http_error(exc) from exc

    event = _commit_roster(db, event, editor)
    return _event_out(event, _student_names(db, admin.id))
