from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from sports_admin.api.deps import get_current_admin
from sports_admin.db.session import get_db
from sports_admin.models.admin import Admin
from sports_admin.models.enums import AgeCategory, HouseName
from sports_admin.schemas.houses import DashboardOut, EventStatusCountsOut, HouseOut, StudentStandingOut
from sports_admin.schemas.students import StudentOut
from sports_admin.services.houses import ensure_houses, initial_points_map
from sports_admin.services.points import (
    aggregate_house_points,
    aggregate_student_points,
    build_leaderboard,
    filter_student_standings,
)
from sports_admin.services.snapshot import load_events, load_students

router = APIRouter(tags=["leaderboard"])


@router.get("/leaderboard/houses", response_model=list[HouseOut])
def house_leaderboard(db: Session = Depends(get_db), admin: Admin = Depends(get_current_admin)):
    baselines = initial_points_map(ensure_houses(db, admin.id))
    standings = aggregate_house_points(load_students(db, admin.id), load_events(db, admin.id), baselines)
    return [HouseOut.model_validate(standing) for standing in standings]


@router.get("/leaderboard/students", response_model=list[StudentStandingOut])
def student_leaderboard(
    house: HouseName | None = Query(default=None),
    category: AgeCategory | None = Query(default=None),
    class_name: str | None = Query(default=None, max_length=16),
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    standings = aggregate_student_points(load_students(db, admin.id), load_events(db, admin.id))
    filtered = filter_student_standings(standings, house=house, category=category, class_name=class_name)
    return [
        StudentStandingOut(
            rank=index,
            student=StudentOut.model_validate(standing.student),
            score=standing.score,
            events_count=standing.events_count,
        )
        for index, standing in enumerate(filtered[:limit], start=1)
    ]


@router.get("/dashboard", response_model=DashboardOut)
def dashboard(db: Session = Depends(get_db), admin: Admin = Depends(get_current_admin)):
    baselines = initial_points_map(ensure_houses(db, admin.id))
    students = load_students(db, admin.id)
    leaderboard = build_leaderboard(students, load_events(db, admin.id), baselines)
    return DashboardOut(
        total_students=len(students),
        events=EventStatusCountsOut.model_validate(leaderboard.status_counts),
        houses=[HouseOut.model_validate(standing) for standing in leaderboard.houses],
    )
