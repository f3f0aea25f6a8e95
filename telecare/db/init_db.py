import logging

from sqlalchemy.engine import Engine

from telecare.db.base import Base
from telecare import models  # noqa: F401  registers the tables on Base.metadata

logger = logging.getLogger(__name__)


def init_db(engine: Engine) -> None:
    """Create missing tables. Production databases are migrated with Alembic."""
    Base.metadata.create_all(bind=engine)
    logger.info(f"Ensured tables: {', '.join(sorted(Base.metadata.tables))}")
