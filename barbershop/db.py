# barbershop/db.py

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

from .config import get_settings


def configure_sqlite(engine: Engine) -> Engine:
    """Enforce foreign keys and take the write lock at BEGIN on SQLite.

    pysqlite's own transaction handling is switched off so every transaction
    starts with BEGIN IMMEDIATE: the overlap check and the insert of a booking
    then run while no other writer can slip in between.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def build_engine(database_url: str, **kwargs) -> Engine:
    if database_url.startswith("sqlite"):
        # required for SQLite + FastAPI
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        return configure_sqlite(create_engine(database_url, echo=False, **kwargs))
    return create_engine(database_url, echo=False, **kwargs)


engine = build_engine(get_settings().database_url)


def init_db(bind: Engine = engine) -> None:
    # models must be imported so their tables are registered on the metadata
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(bind)


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session
