from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from sports_admin.models.enums import EventStatus, EventType
from sports_admin.services.roster import MAX_SCORE


class ParticipantIn(BaseModel):
    student_id: str = Field(..., min_length=1, max_length=36)
    score: int = Field(default=0, ge=0, le=MAX_SCORE)


class ParticipantOut(BaseModel):
    student_id: str
    score: int
    student_name: str | None = None

    model_config = {"from_attributes": True}


class EventCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: EventType
    status: EventStatus = EventStatus.UPCOMING
    max_participants: int = Field(..., ge=1)

    model_config = {"use_enum_values": True}


class EventUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    type: EventType | None = None
    status: EventStatus | None = None
    max_participants: int | None = Field(default=None, ge=1)
    participants: list[ParticipantIn] | None = None

    model_config = {"use_enum_values": True}

    @model_validator(mode="after")
    def validate_participants(self):
        if self.participants is not None:
            student_ids = [item.student_id for item in self.participants]
            if len(student_ids) != len(set(student_ids)):
                raise ValueError("a student can appear only once in an event")
        return self


class EventOut(BaseModel):
    id: str
    name: str
    type: str
    status: str
    max_participants: int
    participants: list[ParticipantOut]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ParticipantAddRequest(BaseModel):
    student_id: str = Field(..., min_length=1, max_length=36)


class RosterUpdateRequest(BaseModel):
    max_participants: int | None = None
    scores: dict[str, str | int | None] = Field(default_factory=dict)
