from contextlib import contextmanager

from sqlalchemy import event
from sqlmodel import Session, SQLModel, create_engine

from dictation import db_models  # noqa: F401  (registers tables)


def get_engine(url: str, **kwargs):
    engine = create_engine(url, pool_pre_ping=True, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def init_db(engine):
    SQLModel.metadata.create_all(engine)


def make_session_factory(engine):
    """Returns a callable producing SQLModel Session context managers."""

    @contextmanager
    def session_factory():
        with Session(engine, expire_on_commit=False) as session:
            yield session

    return session_factory


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
