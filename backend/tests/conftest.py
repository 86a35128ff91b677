"""
Shared pytest fixtures.

Every test gets a fresh in-memory SQLite database.
"""

from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from petroleum_ops.infrastructure.local.database import Base
from petroleum_ops.infrastructure.local.milestone_repository import SqliteMilestoneRepository
from petroleum_ops.infrastructure.local.operation_progress_repository import (
    SqliteOperationProgressRepository,
)
from petroleum_ops.interfaces.event_publisher import IEventPublisher
from petroleum_ops.services.milestone_service import MilestoneService
from petroleum_ops.services.operation_progress_service import OperationProgressService


class RecordingPublisher(IEventPublisher):
    """Publisher that keeps every event for assertions."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    async def publish(self, project_id: str, event: dict[str, Any]) -> None:
        self.events.append((project_id, event))

    def actions(self) -> list[tuple[str, str]]:
        return [(event["resource"], event["action"]) for _, event in self.events]


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def test_user_id():
    return "user-123"


@pytest.fixture
def project_id():
    return "project-abc"


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def milestone_repo(session_factory):
    return SqliteMilestoneRepository(session_factory=session_factory)


@pytest.fixture
def progress_repo(session_factory):
    return SqliteOperationProgressRepository(session_factory=session_factory)


@pytest.fixture
def milestone_service(milestone_repo, publisher):
    return MilestoneService(milestone_repo, publisher)


@pytest.fixture
def progress_service(progress_repo, publisher):
    return OperationProgressService(progress_repo, publisher)
