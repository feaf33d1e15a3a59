# app/data/database.py
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.domain.errors import StorageError
from app.utils.settings import DATABASE_URL, DB_ECHO
from app.utils.logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()


def make_engine(url: str, echo: bool = False):
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        options = {"connect_args": {"check_same_thread": False}}
        #an in-memory database lives only as long as its single connection
        if parsed.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
        engine = create_engine(url, echo=echo, **options)

        #sqlite ignores foreign keys without this pragma
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(url, echo=echo, pool_pre_ping=True)


engine = make_engine(DATABASE_URL, echo=DB_ECHO)
SessionLocal = sessionmaker(bind=engine, autoflush=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def storage_guard(db: Session, operation: str, **context):
    """
    Runs a unit of work against the session.
    Any failure rolls the session back; SQLAlchemy errors surface as StorageError.
    """
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"{operation} failed {context}: {e}")
        raise StorageError(operation) from e
    except Exception:
        db.rollback()
        raise


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
