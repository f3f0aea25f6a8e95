import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from telecare.core.config import settings

logger = logging.getLogger(__name__)


def _engine_kwargs(uri: str) -> dict:
    if uri.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    # PostgreSQL configuration with connection pooling
    return {
        "pool_size": 20,
        "max_overflow": 30,
        "pool_recycle": 300,    # Recycle connections every 5 minutes
        "pool_pre_ping": True,  # Validate connections before use
        "pool_timeout": 45,
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
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Get a database session with proper cleanup using context manager.

    Usage:
        with get_db_session() as db:
            result = db.query(Model).all()
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Database session error: {e}")
        raise
    finally:
        db.close()
