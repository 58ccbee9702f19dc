from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class StudentRequest(BaseModel):
    """
    Body of create and update calls.

    Fields are deliberately loose here: presence, length, email syntax and
    age range are checked by the validator so every violation is reported
    together with its own message.
    """
    name: Optional[str] = Field(default=None, examples=["John Doe"])
    email: Optional[str] = Field(default=None, examples=["john.doe@example.com"])
    course: Optional[str] = Field(default=None, examples=["Computer Science"])
    age: Optional[int] = Field(default=None, examples=[20])


class StudentResponse(BaseModel):
    """Read-facing projection of a stored student."""
    id: int
    name: str
    email: str
    course: str
    age: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )
