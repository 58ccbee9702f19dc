import uvicorn

from student_registry.core.config import get_settings
from student_registry.main import create_app

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)
