from typing import Any, Dict, Optional
from fastapi import status

class BaseAPIException(Exception):
    """
    Parent class for every custom error raised by the service.
    Keeps the error envelope returned to clients uniform.
    """
    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

# =========================================================
# 1. COMMON ERRORS
# =========================================================

class ValidationException(BaseAPIException):
    """400: malformed or out-of-range input, one message per field"""
    def __init__(self, message: str = "Validation failed", details: dict = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )

class NotFoundException(BaseAPIException):
    """404: referenced resource does not exist"""
    def __init__(self, message: str = "Resource not found"):
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND
        )

# =========================================================
# 2. STUDENT DOMAIN ERRORS
# =========================================================

class DuplicateResourceException(BaseAPIException):
    """
    409: a unique attribute (student email) is already taken,
    either caught up front or reported by the store's constraint.
    """
    def __init__(self, message: str = "Resource already exists"):
        super().__init__(
            message=message,
            code="DUPLICATE_RESOURCE",
            status_code=status.HTTP_409_CONFLICT
        )
