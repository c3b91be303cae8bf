import logging
from contextlib import contextmanager

from sqlmodel import SQLModel, create_engine
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool

from .config import DATABASE_URL
from .errors import StoreError

# Import all models to ensure they are registered with SQLModel metadata
from .models import Project, Task  # noqa: F401

logger = logging.getLogger(__name__)


def _create_engine():
    if DATABASE_URL.startswith("sqlite"):
        return create_engine(
            DATABASE_URL,
            echo=False,
            connect_args={"check_same_thread": False},
        )

    # Postgres and friends: no pooling between requests, pre-ping on checkout
    return create_engine(
        DATABASE_URL,
        echo=False,
        pool_pre_ping=True,
        poolclass=NullPool,
    )

engine = _create_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db():
    """Dependency to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

@contextmanager
def get_session():
    """Get a database session (context manager style).

    This is a convenience function for use outside of FastAPI dependencies.
    Usage:
        with get_session() as session:
            # do something with session
    """
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

@contextmanager
def store_operation(db: Session, action: str):
    """Roll back and re-raise database failures as StoreError.

    Usage:
        with store_operation(db, "create task"):
            db.add(task)
            db.commit()
    """
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Store operation failed: %s", action)
        raise StoreError(f"Failed to {action}: {exc.__class__.__name__}") from exc

def check_connection(db: Session) -> bool:
    """Run a trivial statement to see whether the database answers."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("Database connectivity check failed", exc_info=True)
        return False
    return True

def create_tables():
    """Create all database tables."""
    SQLModel.metadata.create_all(bind=engine)
