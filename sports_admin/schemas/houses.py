from pydantic import BaseModel, Field

from sports_admin.schemas.students import StudentOut


class HouseOut(BaseModel):
    name: str
    initial_points: int
    event_points: int
    total_points: int

    model_config = {"from_attributes": True}


class HouseUpdateRequest(BaseModel):
    initial_points: int = Field(..., ge=-(2**31), le=2**31 - 1)


class HouseMemberOut(BaseModel):
    student: StudentOut
    event_names: list[str]
    score: int

    model_config = {"from_attributes": True}


class HouseDetailOut(HouseOut):
    students: list[HouseMemberOut]


class StudentStandingOut(BaseModel):
    rank: int
    student: StudentOut
    score: int
    events_count: int


class EventStatusCountsOut(BaseModel):
    total: int
    upcoming: int
    ongoing: int
    completed: int

    model_config = {"from_attributes": True}


class DashboardOut(BaseModel):
    total_students: int
    events: EventStatusCountsOut
    houses: list[HouseOut]
