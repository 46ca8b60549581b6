import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete, func, or_, select
from sqlalchemy.orm import Session

from sports_admin.api.deps import get_current_admin, get_owned_or_404
from sports_admin.core.config import get_settings
from sports_admin.db.session import get_db
from sports_admin.models.admin import Admin
from sports_admin.models.enums import AgeCategory, HouseName
from sports_admin.models.student import Student
from sports_admin.schemas.students import (
    DeleteResponse,
    ReportEntryOut,
    StudentBulkCreateRequest,
    StudentBulkCreateResponse,
    StudentBulkDeleteRequest,
    StudentBulkDeleteResponse,
    StudentCreateRequest,
    StudentOut,
    StudentReportOut,
    StudentUpdateRequest,
)
from sports_admin.services.points import student_report
from sports_admin.services.snapshot import load_events

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/students", tags=["students"])


def _student_count(db: Session, admin_id: str) -> int:
    return db.scalar(select(func.count()).select_from(Student).where(Student.admin_id == admin_id)) or 0


def _taken_uids(db: Session, admin_id: str, uids: list[str], exclude_id: str | None = None) -> list[str]:
    stmt = select(Student.uid).where(Student.admin_id == admin_id, Student.uid.in_(uids))
    if exclude_id:
        stmt = stmt.where(Student.id != exclude_id)
    return sorted(set(db.scalars(stmt).all()))


@router.get("", response_model=list[StudentOut])
def list_students(
    search: str | None = Query(default=None, max_length=255),
    house: HouseName | None = Query(default=None),
    category: AgeCategory | None = Query(default=None),
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    stmt = select(Student).where(Student.admin_id == admin.id).order_by(Student.full_name)
    if search:
        term = f"%{search.strip().lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(Student.full_name).like(term),
                func.lower(Student.class_name).like(term),
                func.lower(Student.uid).like(term),
            )
        )
    if house:
        stmt = stmt.where(Student.house == house.value)
    if category:
        stmt = stmt.where(Student.category == category.value)
    return db.scalars(stmt).all()


@router.post("", response_model=StudentOut)
def create_student(
    payload: StudentCreateRequest,
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    capacity = get_settings().student_capacity
    if _student_count(db, admin.id) >= capacity:
        raise HTTPException(status_code=400, detail=f"Student capacity of {capacity} has been reached")
    if _taken_uids(db, admin.id, [payload.uid]):
        raise HTTPException(status_code=400, detail=f"A student with UID {payload.uid} already exists")

    student = Student(admin_id=admin.id, **payload.model_dump())
    db.add(student)
    db.commit()
    db.refresh(student)
    return student


@router.post("/bulk", response_model=StudentBulkCreateResponse)
def create_students_bulk(
    payload: StudentBulkCreateRequest,
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    uids = [item.uid for item in payload.students]
    duplicated = sorted({uid for uid in uids if uids.count(uid) > 1})
    if duplicated:
        raise HTTPException(status_code=400, detail=f"Duplicate UIDs in request: {', '.join(duplicated)}")
    taken = _taken_uids(db, admin.id, uids)
    if taken:
        raise HTTPException(status_code=400, detail=f"Students with UID already exist: {', '.join(taken)}")

    capacity = get_settings().student_capacity
    available = capacity - _student_count(db, admin.id)
    if available <= 0:
        raise HTTPException(status_code=400, detail=f"Student capacity of {capacity} has been reached")

    accepted = payload.students[:available]
    students = [Student(admin_id=admin.id, **item.model_dump()) for item in accepted]
    db.add_all(students)
    db.commit()
    for student in students:
        db.refresh(student)

    rejected_count = len(payload.students) - len(accepted)
    if rejected_count:
        logger.info("Bulk create for admin %s: %d students over capacity", admin.id, rejected_count)
    return StudentBulkCreateResponse(
        created=[StudentOut.model_validate(student) for student in students],
        rejected_count=rejected_count,
    )


@router.delete("/bulk", response_model=StudentBulkDeleteResponse)
def delete_students_bulk(
    payload: StudentBulkDeleteRequest,
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    ids = db.scalars(select(Student.id).where(Student.admin_id == admin.id, Student.id.in_(payload.ids))).all()
    if not ids:
        raise HTTPException(status_code=404, detail="No matching students found to delete")

    db.execute(delete(Student).where(Student.id.in_(ids)))
    db.commit()
    return StudentBulkDeleteResponse(
        message=f"{len(ids)} students deleted successfully",
        deleted_count=len(ids),
        deleted_ids=list(ids),
    )


@router.get("/{student_id}", response_model=StudentOut)
def get_student(student_id: str, db: Session = Depends(get_db), admin: Admin = Depends(get_current_admin)):
    return get_owned_or_404(db, Student, student_id, admin, "Student not found")


@router.put("/{student_id}", response_model=StudentOut)
def update_student(
    student_id: str,
    payload: StudentUpdateRequest,
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    student = get_owned_or_404(db, Student, student_id, admin, "Student not found")
    if payload.uid is not None and _taken_uids(db, admin.id, [payload.uid], exclude_id=student.id):
        raise HTTPException(status_code=400, detail=f"A student with UID {payload.uid} already exists")

    for field, value in payload.model_dump(exclude_none=True).items():
        setattr(student, field, value)

    db.add(student)
    db.commit()
    db.refresh(student)
    return student


@router.delete("/{student_id}", response_model=DeleteResponse)
def delete_student(student_id: str, db: Session = Depends(get_db), admin: Admin = Depends(get_current_admin)):
    student = get_owned_or_404(db, Student, student_id, admin, "Student not found")
    db.delete(student)
    db.commit()
    return DeleteResponse(id=student_id, message="Student removed")


@router.get("/{student_id}/report", response_model=StudentReportOut)
def get_student_report(student_id: str, db: Session = Depends(get_db), admin: Admin = Depends(get_current_admin)):
    student = get_owned_or_404(db, Student, student_id, admin, "Student not found")
    report = student_report(student.id, load_events(db, admin.id))
    return StudentReportOut(
        student=StudentOut.model_validate(student),
        events=[ReportEntryOut.model_validate(entry) for entry in report.entries],
        events_count=report.events_count,
        total_points=report.total_points,
        average_score=report.average_score,
    )
