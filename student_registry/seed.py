import logging

from student_registry.core.config import get_settings
from student_registry.core.database import build_engine, build_session_factory, init_db
from student_registry.core.exceptions import DuplicateResourceException
from student_registry.core.logging import setup_logging
from student_registry.schemas.common import PageRequest
from student_registry.schemas.student import StudentRequest
from student_registry.services.student.repository import StudentRepository
from student_registry.services.student.student import StudentService

logger = logging.getLogger(__name__)

SAMPLE_STUDENTS = [
    StudentRequest(name="John Doe", email="john.doe@example.com", course="Computer Science", age=20),
    StudentRequest(name="Jane Smith", email="jane.smith@example.com", course="Mathematics", age=22),
    StudentRequest(name="Ada Lovelace", email="ada.lovelace@example.com", course="Computer Engineering", age=28),
]


def seed_data(service: StudentService) -> int:
    """
    Insert the sample students if the table is empty.

    Returns:
        int: number of students created
    """
    # Check if data already exists to avoid duplication
    if service.get_all_students(PageRequest(size=1)).total_elements:
        logger.info("Database already contains data. Skipping seed.")
        return 0

    logger.info("Seeding data...")
    created = 0
    for payload in SAMPLE_STUDENTS:
        try:
            service.create_student(payload)
            created += 1
        except DuplicateResourceException as e:
            logger.warning(f"Skipping sample student: {e.message}")

    logger.info(f"✅ Seeded {created} students")
    return created


if __name__ == "__main__":
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    engine = build_engine(settings)
    init_db(engine, settings)
    seed_data(StudentService(build_session_factory(engine), StudentRepository()))
