import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from student_registry.api.deps import get_student_service
from student_registry.schemas.common import ApiResponse, Page, PageRequest
from student_registry.schemas.student import StudentRequest, StudentResponse
from student_registry.services.student.student import StudentService

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"description": "Student not found"}}
INVALID = {status.HTTP_400_BAD_REQUEST: {"description": "Invalid input data"}}
DUPLICATE = {status.HTTP_409_CONFLICT: {"description": "Student with email already exists"}}


@router.post(
    "",
    response_model=ApiResponse[StudentResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a new student",
    responses={**INVALID, **DUPLICATE},
)
def create_student(
    payload: StudentRequest,
    service: StudentService = Depends(get_student_service)
):
    """
    Create a new student. Email must be unique.

    - **name**: 2-100 characters
    - **email**: valid email address
    - **course**: 2-100 characters
    - **age**: 18-120
    """
    logger.info("POST /api/students - Creating student")
    student = service.create_student(payload)
    return ApiResponse.ok(student, "Student created successfully")


@router.get(
    "",
    response_model=ApiResponse[Page[StudentResponse]],
    summary="Get all students",
    responses=INVALID,
)
def get_students(
    page: int = Query(0, description="Page number (0-indexed)"),
    size: Optional[int] = Query(None, description="Page size (defaults to DEFAULT_PAGE_SIZE)"),
    sort_by: str = Query("id", alias="sortBy", description="Sort by field (id, name, email, course, age, createdAt, updatedAt)"),
    sort_dir: str = Query("asc", alias="sortDir", description="Sort direction (asc, desc)"),
    search: Optional[str] = Query(None, description="Search term for name or course"),
    service: StudentService = Depends(get_student_service)
):
    """
    List students with pagination and sorting.
    A non-blank **search** term filters by name or course, ignoring case.
    """
    logger.info(
        f"GET /api/students - page={page}, size={size}, sortBy={sort_by}, sortDir={sort_dir}, search={search}"
    )
    if size is None:
        size = service.default_page_size
    page_request = PageRequest(page=page, size=size, sort_by=sort_by, sort_dir=sort_dir)

    if search is not None and search.strip():
        students = service.search_students(search.strip(), page_request)
    else:
        students = service.get_all_students(page_request)

    return ApiResponse.ok(students, "Students retrieved successfully")


@router.get(
    "/{student_id}",
    response_model=ApiResponse[StudentResponse],
    summary="Get student by ID",
    responses=NOT_FOUND,
)
def get_student(
    student_id: int,
    service: StudentService = Depends(get_student_service)
):
    logger.info(f"GET /api/students/{student_id} - Fetching student")
    student = service.get_student_by_id(student_id)
    return ApiResponse.ok(student, "Student retrieved successfully")


@router.put(
    "/{student_id}",
    response_model=ApiResponse[StudentResponse],
    summary="Update student",
    responses={**INVALID, **NOT_FOUND, **DUPLICATE},
)
def update_student(
    student_id: int,
    payload: StudentRequest,
    service: StudentService = Depends(get_student_service)
):
    """
    Replace every field of an existing student. Email must stay unique.
    """
    logger.info(f"PUT /api/students/{student_id} - Updating student")
    student = service.update_student(student_id, payload)
    return ApiResponse.ok(student, "Student updated successfully")


@router.delete(
    "/{student_id}",
    response_model=ApiResponse[None],
    summary="Delete student",
    responses=NOT_FOUND,
)
def delete_student(
    student_id: int,
    service: StudentService = Depends(get_student_service)
):
    logger.info(f"DELETE /api/students/{student_id} - Deleting student")
    service.delete_student(student_id)
    return ApiResponse.ok(None, "Student deleted successfully")
