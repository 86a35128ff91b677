"""
SQLite database configuration and ORM models.

This module defines the SQLAlchemy ORM models and database initialization.
Milestones are stored as documents: tasks live in a JSON column of their
parent milestone row.
"""

from functools import lru_cache
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    String,
    Text,
    JSON,
)
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from petroleum_ops.core.config import get_settings
from petroleum_ops.utils.datetime_utils import now_utc


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


# ===========================================
# ORM Models
# ===========================================


class MilestoneORM(Base):
    """Milestone ORM model (tasks embedded as JSON)."""

    __tablename__ = "milestones"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    project_id = Column(String(64), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    planned_date = Column(Date, nullable=False)
    actual_date = Column(Date, nullable=True)
    status = Column(String(20), default="planned", index=True)
    tasks = Column(JSON, nullable=False, default=list)
    created_by = Column(String(255), nullable=True)
    updated_by = Column(String(255), nullable=True)
    is_deleted = Column(Boolean, default=False, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)


class OperationProgressORM(Base):
    """Operation progress entry ORM model."""

    __tablename__ = "operation_progress"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    project_id = Column(String(64), nullable=False, index=True)
    entry_date = Column("date", Date, nullable=False, index=True)
    milestone = Column(String(200), nullable=False)
    planned_progress = Column(Float, nullable=False)
    actual_progress = Column(Float, nullable=False)
    variance = Column(Float, nullable=False, default=0)
    status = Column(String(20), default="onTrack", index=True)
    challenges = Column(Text, nullable=True)
    actions = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    updated_by = Column(String(255), nullable=True)
    is_deleted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)


# ===========================================
# Database Session Management
# ===========================================


@lru_cache()
def get_engine():
    """Get async engine instance."""
    settings = get_settings()
    return create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG)


def get_session_factory():
    """Get async session factory."""
    engine = get_engine()
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db():
    """Initialize database tables."""
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
