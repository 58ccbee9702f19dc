from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool
from .config import Settings
import logging

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()


# =============================================================================
# DATABASE ENGINE CONFIGURATION
# =============================================================================

def build_engine(settings: Settings) -> Engine:
    """
    Create the database engine for the configured URL.

    Server databases get a QueuePool sized from settings. In-memory SQLite
    (used for tests) gets a single shared connection so the database
    survives across sessions; file SQLite keeps SQLAlchemy's default pool
    so each request works on its own connection.
    """
    if settings.is_sqlite_memory:
        engine = create_engine(
            settings.DATABASE_URL,
            poolclass=StaticPool,
            echo=settings.DB_ECHO_SQL,
            connect_args={"check_same_thread": False},
        )
    elif settings.is_sqlite:
        engine = create_engine(
            settings.DATABASE_URL,
            echo=settings.DB_ECHO_SQL,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_engine(
            settings.DATABASE_URL,

            # Connection pool settings
            poolclass=QueuePool,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,

            # Test connection before using (detect disconnects)
            pool_pre_ping=True,

            echo=settings.DB_ECHO_SQL,

            connect_args={
                "connect_timeout": 10,  # seconds
            }
        )

    if settings.DEBUG:
        _attach_debug_listeners(engine)
    return engine


# =============================================================================
# SESSION CONFIGURATION
# =============================================================================

def build_session_factory(engine: Engine) -> sessionmaker:
    """Session factory: one session per unit of work, explicit commits only."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        expire_on_commit=False  # Projections are built after commit
    )


# =============================================================================
# DATABASE UTILITIES
# =============================================================================

def create_database_tables(engine: Engine):
    """
    Create all database tables defined in models.

    Only missing tables are created; existing ones are left untouched.
    """
    # Register models on Base.metadata
    from student_registry.models import student  # noqa: F401

    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("✅ Database tables created successfully!")


def drop_database_tables(engine: Engine):
    """
    Drop all database tables.

    ⚠️ DANGER: This will delete all data!
    Only use in development/testing.
    """
    logger.warning("⚠️ Dropping all database tables...")
    Base.metadata.drop_all(bind=engine)
    logger.info("✅ Database tables dropped!")


def check_database_connection(engine: Engine) -> bool:
    """
    Check if database connection is working.

    Returns:
        bool: True if connection successful, False otherwise
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        logger.debug("Database connection successful")
        return True
    except Exception as e:
        logger.error(f"❌ Database connection failed: {e}")
        return False


# =============================================================================
# EVENT LISTENERS
# =============================================================================

def _attach_debug_listeners(engine: Engine):
    @event.listens_for(engine, "connect")
    def receive_connect(dbapi_conn, connection_record):
        logger.debug("New database connection established")

    @event.listens_for(engine, "checkout")
    def receive_checkout(dbapi_conn, connection_record, connection_proxy):
        logger.debug("Connection checked out from pool")


# =============================================================================
# INITIALIZATION
# =============================================================================

def init_db(engine: Engine, settings: Settings):
    """
    Initialize database.
    Run this when starting the application.
    """
    logger.info("Initializing database...")

    if not check_database_connection(engine):
        raise RuntimeError("Cannot connect to database!")

    if settings.AUTO_CREATE_TABLES:
        create_database_tables(engine)

    logger.info("✅ Database initialized successfully!")


# =============================================================================
# TEST DATABASE CONNECTION
# =============================================================================

if __name__ == "__main__":
    """Test database connection when running this file directly."""
    logging.basicConfig(level=logging.INFO)

    from .config import get_settings, print_config
    settings = get_settings()
    print_config(settings)

    print("Testing connection...")
    if check_database_connection(build_engine(settings)):
        print("✅ Connection successful!")
    else:
        print("❌ Connection failed!")
