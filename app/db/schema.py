"""
Table definitions.

The repository builds its queries from these Table objects with SQLAlchemy
Core (select / insert / update), so the same DDL and statements work on
PostgreSQL and on the SQLite test database.
"""

from sqlalchemy import (
    Boolean, Column, DateTime, Integer, MetaData, String, Table, Text, Index
)

from app.db.postgres import get_engine

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("user_id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(320), nullable=False, unique=True),
    Column("password_hash", Text, nullable=False),
    Column("account_type", String(20), nullable=False, default="job_seeker"),
    Column("company_name", String(200), nullable=True),
    Column("company_email_verified", Boolean, nullable=False, default=False),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", DateTime, nullable=False),
)

verification_requests = Table(
    "verification_requests",
    metadata,
    Column("request_id", String(32), primary_key=True),
    # weak reference, no FK: requests may outlive their account row
    Column("account_id", Integer, nullable=False),
    Column("candidate_email", String(320), nullable=False),
    Column("candidate_company_name", String(200), nullable=False),
    Column("candidate_website", Text, nullable=True),
    Column("derived_company_name", String(200), nullable=False),
    Column("token_hash", String(64), nullable=False),
    Column("status", String(20), nullable=False),
    Column("created_at", DateTime, nullable=False),
    Column("expires_at", DateTime, nullable=False),
    Column("completed_at", DateTime, nullable=True),
)

Index("ix_verification_requests_account_status",
      verification_requests.c.account_id, verification_requests.c.status)
Index("ix_verification_requests_status_expires",
      verification_requests.c.status, verification_requests.c.expires_at)


def init_db() -> None:
    """Create tables if they don't exist."""
    metadata.create_all(get_engine())


def drop_db() -> None:
    metadata.drop_all(get_engine())
