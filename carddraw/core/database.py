# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Database engine and assignments table, single source of truth for DB connectivity.
"""

from typing import Optional

from sqlalchemy import (
    Column,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from carddraw.core.config import settings

metadata = MetaData()

assignments_table = Table(
    "assignments",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("date", String(10), nullable=False),
    Column("member", String(255), nullable=False),
    Column("card_id", String(255), nullable=False),
    UniqueConstraint("member", "date", name="uq_assignments_member_date"),
    Index("ix_assignments_date", "date"),
    Index("ix_assignments_member", "member"),
)


def is_memory_sqlite(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


def build_engine(url: str) -> Engine:
    """
    Create an engine. In-memory SQLite shares one connection so every session
    sees the same database; file SQLite keeps a pool of per-thread connections.
    """
    if is_memory_sqlite(url):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if make_url(url).get_backend_name() == "sqlite":
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )


def create_schema(engine: Engine) -> None:
    metadata.create_all(engine)


engine: Optional[Engine] = (
    build_engine(settings.DATABASE_URL) if settings.DATABASE_URL else None
)
