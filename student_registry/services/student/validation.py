from dataclasses import dataclass
from typing import List, Optional
from email_validator import EmailNotValidError, validate_email

from student_registry.core.exceptions import ValidationException
from student_registry.schemas.common import SORT_ASC, SORT_DESC, PageRequest
from student_registry.schemas.student import StudentRequest

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
COURSE_MIN_LENGTH = 2
COURSE_MAX_LENGTH = 100
AGE_MIN = 18
AGE_MAX = 120

SORTABLE_FIELDS = ("id", "name", "email", "course", "age", "createdAt", "updatedAt")


@dataclass(frozen=True)
class FieldViolation:
    field: str
    message: str


def _check_text(value: Optional[str], label: str, min_length: int, max_length: int) -> Optional[str]:
    if value is None or not value.strip():
        return f"{label} is required"
    if not min_length <= len(value) <= max_length:
        return f"{label} must be between {min_length} and {max_length} characters"
    return None


def _check_email(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return "Email is required"
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return "Email must be a valid email address"
    return None


def _check_age(value: Optional[int]) -> Optional[str]:
    if value is None:
        return "Age is required"
    if value < AGE_MIN:
        return f"Age must be greater than or equal to {AGE_MIN}"
    if value > AGE_MAX:
        return f"Age must be less than or equal to {AGE_MAX}"
    return None


def collect_student_violations(payload: StudentRequest) -> List[FieldViolation]:
    """Return one violation per invalid field of a create/update payload."""
    checks = (
        ("name", _check_text(payload.name, "Name", NAME_MIN_LENGTH, NAME_MAX_LENGTH)),
        ("email", _check_email(payload.email)),
        ("course", _check_text(payload.course, "Course", COURSE_MIN_LENGTH, COURSE_MAX_LENGTH)),
        ("age", _check_age(payload.age)),
    )
    return [FieldViolation(field, message) for field, message in checks if message]


def collect_page_violations(page_request: PageRequest) -> List[FieldViolation]:
    violations = []
    if page_request.page < 0:
        violations.append(FieldViolation("page", "Page index must not be less than zero"))
    if page_request.size < 1:
        violations.append(FieldViolation("size", "Page size must not be less than one"))
    if page_request.sort_by not in SORTABLE_FIELDS:
        violations.append(FieldViolation(
            "sortBy", f"Sort field must be one of: {', '.join(SORTABLE_FIELDS)}"
        ))
    if page_request.sort_dir.lower() not in (SORT_ASC, SORT_DESC):
        violations.append(FieldViolation("sortDir", "Sort direction must be 'asc' or 'desc'"))
    return violations


def _raise_if_any(violations: List[FieldViolation]):
    if violations:
        raise ValidationException(
            message="Validation failed",
            details={v.field: v.message for v in violations},
        )


def validate_student_request(payload: StudentRequest):
    """Raise ValidationException listing every invalid field, or return None."""
    _raise_if_any(collect_student_violations(payload))


def validate_page_request(page_request: PageRequest):
    _raise_if_any(collect_page_violations(page_request))
