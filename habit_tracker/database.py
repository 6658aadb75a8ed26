from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from habit_tracker.config import settings
from habit_tracker.utils.logger import get_logger

logger = get_logger(__name__)

# Database connection pooling configuration
POOL_SIZE = 5          # Base connections per worker
MAX_OVERFLOW = 10      # Additional connections when needed
POOL_TIMEOUT = 30      # Seconds to wait for connection
POOL_RECYCLE = 1800    # Recycle connections every 30 minutes
POOL_PRE_PING = True   # Validate connections before use

# Global variables for lazy initialization
_engine = None
_session_local = None

Base = declarative_base()


def build_engine(database_url: str):
    """Create an engine with pool settings suited to the database dialect."""
    if database_url.startswith("sqlite"):
        # In-memory SQLite must share a single connection across threads
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=settings.DEBUG,
        )
    return create_engine(
        database_url,
        pool_size=POOL_SIZE,
        max_overflow=MAX_OVERFLOW,
        pool_timeout=POOL_TIMEOUT,
        pool_recycle=POOL_RECYCLE,
        pool_pre_ping=POOL_PRE_PING,
        echo=settings.DEBUG,  # Log SQL queries in debug mode
    )


def get_engine():
    """Get database engine with lazy initialization for worker compatibility."""
    global _engine
    if _engine is None:
        _engine = build_engine(settings.DATABASE_URL)
        logger.info(f"Database pool configured: size={POOL_SIZE}, max_overflow={MAX_OVERFLOW}, timeout={POOL_TIMEOUT}s")
    return _engine


def get_session_local():
    """Get SessionLocal with lazy initialization for worker compatibility."""
    global _session_local
    if _session_local is None:
        _session_local = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=get_engine())
    return _session_local


def init_db():
    """Create any missing tables. Migrations are handled by Alembic."""
    # Import models so they register with Base
    from habit_tracker import models  # noqa: F401
    Base.metadata.create_all(bind=get_engine())
    logger.info("Database initialization check complete")


def get_pool_status():
    """
    Get current database connection pool status.
    Useful for monitoring and debugging.
    """
    try:
        pool = get_engine().pool
        return {
            "pool_size": pool.size(),
            "checked_in": pool.checkedin(),
            "checked_out": pool.checkedout(),
            "overflow": pool.overflow(),
            "pool_type": type(pool).__name__
        }
    except Exception as e:
        return {
            "error": f"Could not get pool status: {str(e)}",
            "pool_type": "unknown"
        }
