"""
Create all tables directly from the models (local development and tests).

Production deployments run Alembic migrations instead (see app.db.migrate).
"""
import logging

from app.db.base import Base
from app.db.session import engine
import app.db.models  # noqa: F401  registers every model on Base.metadata

logger = logging.getLogger(__name__)


def init_db(bind=None) -> None:
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables ensured")
