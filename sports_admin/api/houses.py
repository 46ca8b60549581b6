from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from sports_admin.api.deps import get_current_admin
from sports_admin.db.session import get_db
from sports_admin.models.admin import Admin
from sports_admin.models.enums import HOUSE_NAMES
from sports_admin.schemas.houses import HouseDetailOut, HouseMemberOut, HouseOut, HouseUpdateRequest
from sports_admin.schemas.students import StudentOut
from sports_admin.services.houses import ensure_houses
from sports_admin.services.points import house_event_points, house_roster
from sports_admin.services.snapshot import load_events, load_students

router = APIRouter(prefix="/houses", tags=["houses"])


def _house_name_or_404(name: str) -> str:
    for house_name in HOUSE_NAMES:
        if house_name.lower() == name.lower():
            return house_name
    raise HTTPException(status_code=404, detail="House not found")


@router.get("", response_model=list[HouseOut])
def list_houses(db: Session = Depends(get_db), admin: Admin = Depends(get_current_admin)):
    houses = ensure_houses(db, admin.id)
    event_points = house_event_points(load_students(db, admin.id), load_events(db, admin.id))
    return [
        HouseOut(
            name=house.name,
            initial_points=house.initial_points,
            event_points=event_points[house.name],
            total_points=house.initial_points + event_points[house.name],
        )
        for house in houses
    ]


@router.get("/{name}", response_model=HouseDetailOut)
def house_details(name: str, db: Session = Depends(get_db), admin: Admin = Depends(get_current_admin)):
    house_name = _house_name_or_404(name)
    house = next(item for item in ensure_houses(db, admin.id) if item.name == house_name)
    members = house_roster(house_name, load_students(db, admin.id), load_events(db, admin.id))
    event_points = sum(member.score for member in members)
    return HouseDetailOut(
        name=house.name,
        initial_points=house.initial_points,
        event_points=event_points,
        total_points=house.initial_points + event_points,
        students=[
            HouseMemberOut(
                student=StudentOut.model_validate(member.student),
                event_names=member.event_names,
                score=member.score,
            )
            for member in members
        ],
    )


@router.put("/{name}", response_model=HouseOut)
def update_house(
    name: str,
    payload: HouseUpdateRequest,
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    house_name = _house_name_or_404(name)
    house = next(item for item in ensure_houses(db, admin.id) if item.name == house_name)
    house.initial_points = payload.initial_points
    db.add(house)
    db.commit()
    db.refresh(house)

    event_points = house_event_points(load_students(db, admin.id), load_events(db, admin.id))[house.name]
    return HouseOut(
        name=house.name,
        initial_points=house.initial_points,
        event_points=event_points,
        total_points=house.initial_points + event_points,
    )
