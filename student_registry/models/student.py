from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, Integer, String
from student_registry.core.database import Base


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every supported backend round-trips."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Student(Base):
    __tablename__ = "students"

    # sqlite_autoincrement keeps deleted ids from being handed out again
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    course = Column(String(100), nullable=False)
    age = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<Student id={self.id} email={self.email!r}>"
