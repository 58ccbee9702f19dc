from fastapi import APIRouter
from student_registry.api.endpoints import students

api_router = APIRouter()

api_router.include_router(
    students.router,
    prefix="/students",
    tags=["Student Management"]
)
