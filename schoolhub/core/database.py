"""Database connection and session management."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from schoolhub.core.config import settings


class Base(DeclarativeBase):
    """SQLAlchemy declarative base class."""

    pass


def _engine_options() -> dict[str, Any]:
    """Engine keyword arguments for the configured backend."""
    if settings.is_sqlite:
        # SQLite connections are shared across FastAPI's threadpool
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
    }


# Note: echo=False to disable SQL logging; services log through their own loggers
engine = create_engine(
    settings.DATABASE_URL,
    echo=False,
    **_engine_options(),
)

SessionLocal = sessionmaker(
    bind=engine,
    class_=Session,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


def get_db() -> Generator[Session, None, None]:
    """Get database session dependency."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_tables() -> None:
    """Create all tables registered on the declarative base."""
    # Import models so every table is registered before create_all
    import schoolhub.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
