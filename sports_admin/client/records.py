from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator


class StudentRecord(BaseModel):
    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    full_name: str
    class_name: str
    uid: str
    phone: str
    house: str
    category: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ParticipantRecord(BaseModel):
    student_id: str
    score: int = 0
    student_name: str | None = None

    @field_validator("student_id", mode="before")
    @classmethod
    def unwrap_populated_student(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return value.get("id") or value.get("_id")
        return value


class EventRecord(BaseModel):
    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    name: str
    type: str
    status: str
    max_participants: int
    participants: list[ParticipantRecord] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class HouseRecord(BaseModel):
    name: str
    initial_points: int = 0
    event_points: int = 0
    total_points: int = 0
