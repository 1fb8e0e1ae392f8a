"""
Database engine, session factory and unit of work.
"""

from pathlib import Path
from typing import Callable, Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from ledger.config import settings

Base = declarative_base()

SessionFactory = Callable[[], Session]


def build_engine(database_url: str) -> Engine:
    """Create an engine; SQLite connections get foreign key enforcement."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(database_url, connect_args=connect_args)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", enable_sqlite_foreign_keys)
    return engine


def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def ensure_sqlite_directory(database_url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


engine = build_engine(settings.database_url)
SessionLocal = build_session_factory(engine)


def get_db() -> Generator[Session, None, None]:
    """
    Yield a database session and close it afterwards.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


class UnitOfWork:
    """
    Transaction scope over a single session.

    Leaving the ``with`` block normally commits; leaving it with an exception
    rolls back and re-raises. A unit of work created with ``start`` owns its
    session and closes it on exit; one wrapping an existing session leaves
    closing to whoever opened it.
    """

    def __init__(self, session: Session, close_on_exit: bool = False):
        self.session = session
        self._close_on_exit = close_on_exit

    @classmethod
    def start(cls, session_factory: Optional[SessionFactory] = None) -> "UnitOfWork":
        factory = session_factory or SessionLocal
        return cls(factory(), close_on_exit=True)

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            if exc_type is None:
                self.session.commit()
            else:
                self.session.rollback()
        finally:
            if self._close_on_exit:
                self.session.close()
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
