import logging
from dataclasses import replace
from datetime import timedelta
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from student_registry.core.exceptions import DuplicateResourceException, NotFoundException
from student_registry.models.student import Student, utcnow
from student_registry.schemas.common import Page, PageRequest
from student_registry.schemas.student import StudentRequest, StudentResponse
from student_registry.services.student.repository import StudentRepository
from student_registry.services.student.validation import (
    validate_page_request,
    validate_student_request,
)

logger = logging.getLogger(__name__)


class StudentService:
    """
    Business rules for student records.

    Each public method is one unit of work: it opens its own session from
    the factory, commits explicitly when it writes and closes the session
    before returning.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        repository: StudentRepository,
        default_page_size: int = 10,
        max_page_size: int = 2000,
    ):
        self._session_factory = session_factory
        self._repository = repository
        self.default_page_size = default_page_size
        self._max_page_size = max_page_size

    def create_student(self, payload: StudentRequest) -> StudentResponse:
        validate_student_request(payload)
        logger.info(f"Creating student with email: {payload.email}")

        with self._session_factory() as session:
            if self._repository.exists_by_email(session, payload.email):
                raise self._duplicate(payload.email)

            now = utcnow()
            student = Student(
                name=payload.name,
                email=payload.email,
                course=payload.course,
                age=payload.age,
                created_at=now,
                updated_at=now,
            )
            self._persist(session, student, payload.email)
            logger.info(f"Student created successfully with ID: {student.id}")
            return StudentResponse.model_validate(student)

    def get_student_by_id(self, student_id: int) -> StudentResponse:
        logger.info(f"Fetching student with ID: {student_id}")
        with self._session_factory() as session:
            return StudentResponse.model_validate(self._get_or_404(session, student_id))

    def get_all_students(self, page_request: PageRequest) -> Page[StudentResponse]:
        validate_page_request(page_request)
        page_request = self._bounded(page_request)
        logger.info(
            f"Fetching all students with pagination: page={page_request.page}, size={page_request.size}"
        )
        with self._session_factory() as session:
            students, total = self._repository.find_all_paged(session, page_request)
            return self._to_page(students, total, page_request)

    def search_students(self, term: Optional[str], page_request: PageRequest) -> Page[StudentResponse]:
        """Case-insensitive substring search on name or course; blank term lists everything."""
        if term is None or not term.strip():
            return self.get_all_students(page_request)

        validate_page_request(page_request)
        page_request = self._bounded(page_request)
        logger.info(f"Searching students with term: {term}")
        with self._session_factory() as session:
            students, total = self._repository.search_paged(session, term, page_request)
            return self._to_page(students, total, page_request)

    def update_student(self, student_id: int, payload: StudentRequest) -> StudentResponse:
        validate_student_request(payload)
        logger.info(f"Updating student with ID: {student_id}")

        with self._session_factory() as session:
            student = self._get_or_404(session, student_id)

            # Exact comparison: changing only the case of an email counts as a change
            if student.email != payload.email and self._repository.exists_by_email(session, payload.email):
                raise self._duplicate(payload.email)

            student.name = payload.name
            student.email = payload.email
            student.course = payload.course
            student.age = payload.age
            student.updated_at = self._next_timestamp(student)

            self._persist(session, student, payload.email)
            logger.info(f"Student updated successfully with ID: {student.id}")
            return StudentResponse.model_validate(student)

    def delete_student(self, student_id: int):
        logger.info(f"Deleting student with ID: {student_id}")
        with self._session_factory() as session:
            student = self._get_or_404(session, student_id)
            self._repository.delete(session, student)
        logger.info(f"Student deleted successfully with ID: {student_id}")

    # -------------------------------------------------------------------------

    def _get_or_404(self, session: Session, student_id: int) -> Student:
        student = self._repository.find_by_id(session, student_id)
        if student is None:
            raise NotFoundException(f"Student not found with id: {student_id}")
        return student

    def _persist(self, session: Session, student: Student, email: str):
        try:
            self._repository.save(session, student)
        except IntegrityError:
            # Lost a race on the unique email constraint
            session.rollback()
            logger.warning(f"Unique constraint rejected email: {email}")
            raise self._duplicate(email)

    def _bounded(self, page_request: PageRequest) -> PageRequest:
        if page_request.size > self._max_page_size:
            return replace(page_request, size=self._max_page_size)
        return page_request

    @staticmethod
    def _next_timestamp(student: Student):
        now = utcnow()
        if now <= student.updated_at:
            now = student.updated_at + timedelta(microseconds=1)
        return now

    @staticmethod
    def _duplicate(email: str) -> DuplicateResourceException:
        return DuplicateResourceException(f"Student with email {email} already exists")

    @staticmethod
    def _to_page(students, total: int, page_request: PageRequest) -> Page[StudentResponse]:
        content = [StudentResponse.model_validate(s) for s in students]
        return Page[StudentResponse].build(content, total, page_request)
