from contextlib import contextmanager
from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.orm.exc import StaleDataError
from typing import Generator, Iterator
import logging
import redis
from .config import settings
from .exceptions import ConflictError

logger = logging.getLogger(__name__)

_database_url = settings.get_database_url

if _database_url.startswith("sqlite"):
    # SQLite is used for tests and local runs; requests may hop threads
    engine = create_engine(
        _database_url,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        # SQLite ignores ON DELETE rules unless asked per connection
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
else:
    engine = create_engine(
        _database_url,
        pool_size=5,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=1800,  # Recycle connections after 30 minutes
        pool_pre_ping=True,
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Connections are opened lazily on first command
redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True)

# Database dependency
def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# Redis dependency
def get_redis():
    """Get Redis client."""
    return redis_client

# Database initialization
def init_db():
    """Initialize database tables."""
    # Register every mapped table on Base.metadata
    from ..models import user, doctor, schedule, appointment, medical_record  # noqa: F401

    Base.metadata.create_all(bind=engine)

@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Commit the block's writes as one unit, or roll all of them back."""
    try:
        yield db
        db.commit()
    except StaleDataError:
        db.rollback()
        raise ConflictError("Record was modified concurrently; reload and retry")
    except IntegrityError as exc:
        db.rollback()
        logger.warning(f"Integrity error, rolled back: {exc.orig}")
        raise ConflictError("Write conflicts with existing data")
    except Exception:
        db.rollback()
        raise
