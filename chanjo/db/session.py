from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from chanjo.core.config import settings


def _engine_kwargs(uri: str) -> dict:
    if uri.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    # PostgreSQL configuration with connection pooling
    return {
        "pool_size": 10,
        "max_overflow": 20,
        "pool_recycle": 300,     # Recycle connections every 5 minutes
        "pool_pre_ping": True,   # Validate connections before use
        "pool_timeout": 30,
    }


engine = create_engine(
    settings.SQLALCHEMY_DATABASE_URI,
    echo=False,
    **_engine_kwargs(settings.SQLALCHEMY_DATABASE_URI),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Get a database session for code running outside a request (Celery tasks,
    scripts). Rolls back on error and always closes the session.

    Usage:
        with get_db_session() as db:
            run_daily_sweep(db, gateway, now)
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
