import pytest
from fastapi.testclient import TestClient

from student_registry.core.config import Settings
from student_registry.core.database import build_engine, build_session_factory, create_database_tables
from student_registry.main import create_app
from student_registry.schemas.student import StudentRequest
from student_registry.services.student.repository import StudentRepository
from student_registry.services.student.student import StudentService


def make_settings(**overrides) -> Settings:
    values = {"DATABASE_URL": "sqlite://", "LOG_LEVEL": "WARNING"}
    values.update(overrides)
    return Settings(**values)


def student_payload(**overrides) -> dict:
    payload = {
        "name": "John Doe",
        "email": "john@x.com",
        "course": "CS",
        "age": 20,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def engine():
    engine = build_engine(make_settings())
    create_database_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def repository():
    return StudentRepository()


@pytest.fixture
def service(session_factory, repository):
    return StudentService(session_factory, repository, max_page_size=50)


@pytest.fixture
def make_student(service):
    """Create a student through the service and return its projection."""
    def _make(**overrides):
        return service.create_student(StudentRequest(**student_payload(**overrides)))
    return _make


@pytest.fixture
def app():
    return create_app(make_settings())


@pytest.fixture
def client(app):
    # Entering the context runs startup, which creates the tables
    with TestClient(app) as client:
        yield client
