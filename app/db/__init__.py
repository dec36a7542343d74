"""
Database module - SQLAlchemy engine, sessions and table definitions.
"""
from app.db.postgres import get_db_session, init_engine, test_postgres_connection
from app.db.schema import init_db

__all__ = [
    "get_db_session",
    "init_engine",
    "init_db",
    "test_postgres_connection",
]
