"""Parsing of ``FullName,Class,UID,Phone`` student lists for bulk registration."""

import csv
import io
import logging
import re
from dataclasses import dataclass, field

from sports_admin.models.enums import AGE_CATEGORIES, HOUSE_NAMES

logger = logging.getLogger(__name__)

NAME_PATTERN = re.compile(r"[A-Za-z ]+")
UID_PATTERN = re.compile(r"[0-9]+")
PHONE_PATTERN = re.compile(r"[0-9]{10}")
VALID_CLASSES = frozenset(str(grade) for grade in range(1, 13))


@dataclass(frozen=True)
class StudentRow:
    full_name: str
    class_name: str
    uid: str
    phone: str
    house: str
    category: str

    def as_payload(self) -> dict[str, str]:
        return {
            "full_name": self.full_name,
            "class_name": self.class_name,
            "uid": self.uid,
            "phone": self.phone,
            "house": self.house,
            "category": self.category,
        }


@dataclass(frozen=True)
class SkippedLine:
    line_number: int
    line: str
    reason: str


@dataclass
class ImportPlan:
    students: list[StudentRow] = field(default_factory=list)
    skipped: list[SkippedLine] = field(default_factory=list)
    over_capacity: list[StudentRow] = field(default_factory=list)


def validate_row(full_name: str, class_name: str, uid: str, phone: str) -> str | None:
    """Return why a record is rejected, or ``None`` when it is acceptable."""
    if not (full_name and class_name and uid and phone):
        return "expected FullName,Class,UID,Phone"
    if not NAME_PATTERN.fullmatch(full_name):
        return f"name '{full_name}' must contain only letters and spaces"
    if not UID_PATTERN.fullmatch(uid):
        return f"UID '{uid}' must contain only numbers"
    if not PHONE_PATTERN.fullmatch(phone):
        return f"phone number '{phone}' is not 10 digits"
    if class_name not in VALID_CLASSES:
        return f"class '{class_name}' is not valid (must be 1-12)"
    return None


def parse_student_csv(text: str) -> ImportPlan:
    """Parse the pasted list, dropping malformed records.

    Valid records are spread over the houses and age categories in turn, in
    the order they appear; rejected lines do not advance the rotation.
    """
    plan = ImportPlan()
    reader = csv.reader(io.StringIO(text.strip()))
    for line_number, fields in enumerate(reader, start=1):
        if not fields or not any(item.strip() for item in fields):
            continue
        values = [item.strip() for item in fields] + [""] * 4
        full_name, class_name, uid, phone = values[:4]

        reason = validate_row(full_name, class_name, uid, phone)
        if reason:
            logger.warning("Skipping line %d: %s", line_number, reason)
            plan.skipped.append(SkippedLine(line_number=line_number, line=",".join(fields), reason=reason))
            continue

        index = len(plan.students)
        plan.students.append(
            StudentRow(
                full_name=full_name,
                class_name=class_name,
                uid=uid,
                phone=phone,
                house=HOUSE_NAMES[index % len(HOUSE_NAMES)],
                category=AGE_CATEGORIES[index % len(AGE_CATEGORIES)],
            )
        )
    return plan


def apply_capacity(plan: ImportPlan, existing_count: int, capacity: int) -> ImportPlan:
    """Keep only as many records as there are free slots; the rest move to ``over_capacity``."""
    available = max(0, capacity - existing_count)
    return ImportPlan(
        students=plan.students[:available],
        skipped=list(plan.skipped),
        over_capacity=plan.over_capacity + plan.students[available:],
    )
