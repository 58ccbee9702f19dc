import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from student_registry.api.router import api_router
from student_registry.core.config import Settings, get_settings
from student_registry.core.database import build_engine, build_session_factory, check_database_connection, init_db
from student_registry.core.handlers import register_exception_handlers
from student_registry.core.logging import setup_logging
from student_registry.services.student.repository import StudentRepository
from student_registry.services.student.student import StudentService

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application and wire its collaborators once:
    engine -> session factory -> repository -> service.
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    engine = build_engine(settings)
    session_factory = build_session_factory(engine)
    student_service = StudentService(
        session_factory,
        StudentRepository(),
        default_page_size=settings.DEFAULT_PAGE_SIZE,
        max_page_size=settings.MAX_PAGE_SIZE,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(engine, settings)
        yield
        engine.dispose()
        logger.info("Database engine disposed")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.APP_VERSION,
        description="REST API for managing students",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.student_service = student_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    # Include API router
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root():
        """
        Service banner
        """
        return {
            "message": f"Welcome to {settings.PROJECT_NAME}",
            "docs": "/docs",
            "version": settings.APP_VERSION
        }

    @app.get("/health")
    def health(request: Request):
        """
        Health check endpoint
        """
        database_up = check_database_connection(request.app.state.engine)
        return {
            "status": "ok" if database_up else "degraded",
            "database": "up" if database_up else "down",
        }

    return app
