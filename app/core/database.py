import logging
from datetime import datetime

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.core.config import settings

logger = logging.getLogger(__name__)


def _connect_args(database_url: str) -> dict:
    # SQLite connections are shared across FastAPI's threadpool workers
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


def configure_sqlite(sqlite_engine):
    """Enforce foreign keys and let SQLAlchemy own BEGIN so savepoints work on pysqlite"""

    @event.listens_for(sqlite_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(sqlite_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return sqlite_engine


engine = create_engine(
    settings.database_url,
    connect_args=_connect_args(settings.database_url),
    pool_pre_ping=True,
)
if engine.dialect.name == "sqlite":
    configure_sqlite(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


@event.listens_for(Session, "before_flush")
def stamp_updated_at(session, flush_context, instances):
    """Stamp updated_at on every modified row before it is written."""
    now = datetime.utcnow()
    for instance in session.dirty:
        if not hasattr(instance, "updated_at"):
            continue
        if session.is_modified(instance, include_collections=False):
            instance.updated_at = now
