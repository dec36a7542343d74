from typing import Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from contextlib import contextmanager
from app.core.config import get_settings

# Global engine/session factory, created on first use (singleton pattern)
_engine: Optional[Engine] = None
SessionLocal: Optional[sessionmaker] = None


def _use_immediate_transactions(engine: Engine) -> None:
    """
    pysqlite starts transactions lazily and lets two writers deadlock on
    lock upgrade. Take the write lock at BEGIN so writers queue instead.
    """
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def init_engine(url: Optional[str] = None) -> Engine:
    """
    Create (or re-create) the engine and session factory.
    Tests call this with a SQLite URL; production uses settings.
    """
    global _engine, SessionLocal
    settings = get_settings()
    url = url or settings.sqlalchemy_url

    if _engine is not None:
        _engine.dispose()

    if url.startswith("sqlite"):
        # SQLite is shared between request threads in tests
        _engine = create_engine(url, connect_args={"check_same_thread": False, "timeout": 15})
        _use_immediate_transactions(_engine)
    else:
        # pool_size=5: maintain 5 connections ready
        # max_overflow=10: allow 10 extra connections under load
        _engine = create_engine(
            url,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,
            echo=settings.debug  # Log SQL queries in debug mode
        )

    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_engine)
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        init_engine()
    return _engine


@contextmanager
def get_db_session():
    """
    Context manager for database sessions.
    Everything inside the block is one transaction.
    Usage:
        with get_db_session() as db:
            db.execute(text("SELECT * FROM users"))
    """
    if SessionLocal is None:
        init_engine()
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def test_postgres_connection() -> bool:
    """
    Test if the database is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            result = db.execute(text("SELECT 1 as test"))
            row = result.fetchone()
            return row[0] == 1
    except Exception as e:
        print(f"Database connection failed: {e}")
        return False
