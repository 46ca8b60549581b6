from datetime import datetime

from pydantic import BaseModel, Field

from sports_admin.models.enums import AgeCategory, HouseName


class StudentCreateRequest(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=255)
    class_name: str = Field(..., min_length=1, max_length=16)
    uid: str = Field(..., max_length=32, pattern=r"^[0-9]+$")
    phone: str = Field(..., min_length=1, max_length=32)
    house: HouseName
    category: AgeCategory

    model_config = {"use_enum_values": True}


class StudentUpdateRequest(BaseModel):
    full_name: str | None = Field(default=None, min_length=1, max_length=255)
    class_name: str | None = Field(default=None, min_length=1, max_length=16)
    uid: str | None = Field(default=None, max_length=32, pattern=r"^[0-9]+$")
    phone: str | None = Field(default=None, min_length=1, max_length=32)
    house: HouseName | None = None
    category: AgeCategory | None = None

    model_config = {"use_enum_values": True}


class StudentOut(BaseModel):
    id: str
    full_name: str
    class_name: str
    uid: str
    phone: str
    house: str
    category: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class StudentBulkCreateRequest(BaseModel):
    students: list[StudentCreateRequest] = Field(..., min_length=1)


class StudentBulkCreateResponse(BaseModel):
    created: list[StudentOut]
    rejected_count: int


class StudentBulkDeleteRequest(BaseModel):
    ids: list[str] = Field(..., min_length=1)


class StudentBulkDeleteResponse(BaseModel):
    message: str
    deleted_count: int
    deleted_ids: list[str]


class DeleteResponse(BaseModel):
    id: str
    message: str


class ReportEntryOut(BaseModel):
    event_id: str
    event_name: str
    event_type: str
    score: int

    model_config = {"from_attributes": True}


class StudentReportOut(BaseModel):
    student: StudentOut
    events: list[ReportEntryOut]
    events_count: int
    total_points: int
    average_score: float | None
