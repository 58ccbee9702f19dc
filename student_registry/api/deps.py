from fastapi import Request
from student_registry.services.student.student import StudentService


def get_student_service(request: Request) -> StudentService:
    """
    Dependency returning the StudentService wired in create_app().
    """
    return request.app.state.student_service
