# student_registry/core/handlers.py
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from student_registry.core.exceptions import BaseAPIException
import logging

logger = logging.getLogger(__name__)


def _envelope(status_code: int, message: str, data=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": message,
            "data": data,
        },
    )

# 1. Handle custom logic errors (raised by validator and service)
async def custom_api_exception_handler(request: Request, exc: BaseAPIException):
    logger.warning(f"{request.method} {request.url.path} failed with {exc.code}: {exc.message}")
    return _envelope(exc.status_code, exc.message, exc.details)

# 2. Handle request parsing errors (body is not JSON, wrong JSON types, bad query params)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = {}
    for error in exc.errors():
        # "body.age" -> "age", "query.page" -> "page"
        parts = [x for x in error["loc"] if x not in ("body", "query", "path")]
        # Unparsable JSON reports ("body", <char offset>)
        if len(parts) == 1 and isinstance(parts[0], int):
            parts = []
        field = ".".join(str(x) for x in parts)
        details[field or "body"] = error["msg"]

    return _envelope(status.HTTP_400_BAD_REQUEST, "Validation failed", details)

# 3. Handle standard HTTP errors (unknown URL, wrong method, ...)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _envelope(exc.status_code, str(exc.detail))

# 4. Handle everything else as an unexpected failure
async def general_exception_handler(request: Request, exc: Exception):
    logger.critical(f"Unhandled Exception: {exc}", exc_info=True)
    return _envelope(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred. Please contact support.",
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(BaseAPIException, custom_api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
