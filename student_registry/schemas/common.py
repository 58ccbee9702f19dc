import math
from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")

SORT_ASC = "asc"
SORT_DESC = "desc"


class ApiResponse(BaseModel, Generic[T]):
    """
    Every endpoint returns this shape:
    {
        "success": true,
        "message": "Student created successfully",
        "data": { ... }
    }
    """
    success: bool = True
    message: str = "OK"
    data: Optional[T] = None

    @classmethod
    def ok(cls, data=None, message: str = "OK"):
        return cls(success=True, message=message, data=data)


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page index, page size and ordering of a listing."""
    page: int = 0
    size: int = 10
    sort_by: str = "id"
    sort_dir: str = SORT_ASC

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def descending(self) -> bool:
        return self.sort_dir.lower() == SORT_DESC


class Page(BaseModel, Generic[T]):
    """A bounded, ordered slice of a result set plus total-count metadata."""
    content: List[T] = []
    page: int = 0
    size: int = 10
    total_elements: int = 0
    total_pages: int = 0
    first: bool = True
    last: bool = True

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def build(cls, content: List[T], total: int, page_request: PageRequest) -> "Page[T]":
        total_pages = math.ceil(total / page_request.size) if total else 0
        return cls(
            content=content,
            page=page_request.page,
            size=page_request.size,
            total_elements=total,
            total_pages=total_pages,
            first=page_request.page == 0,
            last=page_request.page >= total_pages - 1,
        )
