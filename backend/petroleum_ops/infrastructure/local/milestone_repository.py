"""
SQLite implementation of Milestone repository.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel
from sqlalchemy import and_, select
from sqlalchemy.exc import SQLAlchemyError

from petroleum_ops.core.exceptions import UnexpectedError
from petroleum_ops.infrastructure.local.database import MilestoneORM, get_session_factory
from petroleum_ops.interfaces.milestone_repository import IMilestoneRepository
from petroleum_ops.models.milestone import Milestone, MilestoneTask
from petroleum_ops.utils.datetime_utils import ensure_utc, now_utc


def _to_column(field: str, value: Any) -> Any:
    """Convert a model value to what the ORM column stores."""
    if field == "tasks":
        return [
            task.model_dump(mode="json") if isinstance(task, BaseModel) else dict(task)
            for task in value
        ]
    if isinstance(value, Enum):
        return value.value
    return value


class SqliteMilestoneRepository(IMilestoneRepository):
    """SQLite implementation of milestone repository."""

    def __init__(self, session_factory=None):
        """
        Initialize repository.

        Args:
            session_factory: Optional session factory (for testing)
        """
        self._session_factory = session_factory or get_session_factory()
        # Serializes task-list read-modify-write cycles within this process.
        self._tasks_lock = asyncio.Lock()

    @asynccontextmanager
    async def _session(self):
        try:
            async with self._session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            raise UnexpectedError("Milestone store is unavailable", details=str(exc)) from exc

    def _orm_to_model(self, orm: MilestoneORM) -> Milestone:
        """Convert ORM object to Pydantic model."""
        milestone = Milestone.model_validate(orm, from_attributes=True)
        return milestone.model_copy(
            update={
                "created_at": ensure_utc(milestone.created_at),
                "updated_at": ensure_utc(milestone.updated_at),
            }
        )

    async def _get_orm(self, session, milestone_id: str) -> Optional[MilestoneORM]:
        result = await session.execute(
            select(MilestoneORM).where(
                and_(MilestoneORM.id == milestone_id, MilestoneORM.is_deleted.is_(False))
            )
        )
        return result.scalar_one_or_none()

    async def find_by_project(self, project_id: str) -> list[Milestone]:
        """List non-deleted milestones of a project, earliest planned date first."""
        async with self._session() as session:
            result = await session.execute(
                select(MilestoneORM)
                .where(
                    and_(
                        MilestoneORM.project_id == project_id,
                        MilestoneORM.is_deleted.is_(False),
                    )
                )
                .order_by(MilestoneORM.planned_date, MilestoneORM.created_at)
            )
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def get_by_id(self, milestone_id: str) -> Optional[Milestone]:
        """Get a milestone by ID."""
        async with self._session() as session:
            orm = await self._get_orm(session, milestone_id)
            return self._orm_to_model(orm) if orm else None

    async def insert(self, milestone: Milestone) -> Milestone:
        """Insert a new milestone document."""
        async with self._session() as session:
            data = {
                field: _to_column(field, getattr(milestone, field))
                for field in Milestone.model_fields
            }
            orm = MilestoneORM(**data)
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def update_by_id(self, milestone_id: str, patch: dict[str, Any]) -> Optional[Milestone]:
        """Apply a field patch to one milestone document."""
        async with self._session() as session:
            orm = await self._get_orm(session, milestone_id)
            if not orm:
                return None

            for field, value in patch.items():
                setattr(orm, field, _to_column(field, value))

            orm.updated_at = now_utc()
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def update_tasks(
        self,
        milestone_id: str,
        mutate: Callable[[list[MilestoneTask]], list[MilestoneTask]],
        patch: Optional[dict[str, Any]] = None,
    ) -> Optional[Milestone]:
        """Rewrite a milestone's task list from its current stored value."""
        async with self._tasks_lock:
            async with self._session() as session:
                orm = await self._get_orm(session, milestone_id)
                if not orm:
                    return None

                stored = [MilestoneTask.model_validate(item) for item in orm.tasks or []]
                orm.tasks = _to_column("tasks", mutate(stored))
                for field, value in (patch or {}).items():
                    setattr(orm, field, _to_column(field, value))

                orm.updated_at = now_utc()
                await session.commit()
                await session.refresh(orm)
                return self._orm_to_model(orm)
