# app/repos/upsert.py
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def dialect_insert(db: Session):
    """INSERT construct with ON CONFLICT support for the session's backend."""
    name = db.get_bind().dialect.name
    try:
        return _INSERTS[name]
    except KeyError:
        raise RuntimeError(f"ON CONFLICT upsert is not supported for dialect {name}")
