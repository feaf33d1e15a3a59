# app/data/init_db.py
from app.data.database import Base, engine
from app.data import models  # noqa: F401
from app.utils.logging import get_logger

logger = get_logger(__name__)


def init_db(bind=None):
    bind = bind or engine
    logger.info(f"Models registered in Base.metadata: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=bind)
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise
    logger.info("Database tables ready")
