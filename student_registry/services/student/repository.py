"""
Query surface over the ``students`` table.

Every method takes the session of the caller's unit of work; the repository
never opens or closes sessions itself. Only ``save`` and ``delete`` commit.
"""
from typing import List, Optional, Tuple
from sqlalchemy import exists
from sqlalchemy.orm import Query, Session

from student_registry.models.student import Student
from student_registry.schemas.common import PageRequest

# API sort keys -> mapped columns
SORT_COLUMNS = {
    "id": Student.id,
    "name": Student.name,
    "email": Student.email,
    "course": Student.course,
    "age": Student.age,
    "createdAt": Student.created_at,
    "updatedAt": Student.updated_at,
}


class StudentRepository:
    """Repository for Student entity operations."""

    def find_by_id(self, session: Session, student_id: int) -> Optional[Student]:
        return session.get(Student, student_id)

    def find_by_email(self, session: Session, email: str) -> Optional[Student]:
        return session.query(Student).filter(Student.email == email).first()

    def exists_by_email(self, session: Session, email: str) -> bool:
        """Exact-match existence check that never loads the row."""
        return session.query(exists().where(Student.email == email)).scalar()

    def find_all_paged(self, session: Session, page_request: PageRequest) -> Tuple[List[Student], int]:
        """
        Get one page of students.

        Returns:
            (students on the requested page, total number of students)
        """
        return self._paginate(session.query(Student), page_request)

    def search_paged(self, session: Session, term: str, page_request: PageRequest) -> Tuple[List[Student], int]:
        """
        Get one page of students whose name or course contains ``term``,
        ignoring case. LIKE wildcards inside ``term`` match literally.
        """
        query = session.query(Student).filter(
            Student.name.icontains(term, autoescape=True)
            | Student.course.icontains(term, autoescape=True)
        )
        return self._paginate(query, page_request)

    def save(self, session: Session, student: Student) -> Student:
        """Stage a new or modified student and commit the unit of work."""
        session.add(student)
        session.commit()
        return student

    def delete(self, session: Session, student: Student):
        session.delete(student)
        session.commit()

    def _paginate(self, query: Query, page_request: PageRequest) -> Tuple[List[Student], int]:
        total = query.order_by(None).count()
        if page_request.offset >= total:
            # Past the last page; also keeps huge offsets away from the store
            return [], total
        column = SORT_COLUMNS[page_request.sort_by]
        ordering = column.desc() if page_request.descending else column.asc()
        # id breaks ties so consecutive pages never overlap
        items = (
            query.order_by(ordering, Student.id.asc())
            .offset(page_request.offset)
            .limit(page_request.size)
            .all()
        )
        return items, total
