"""
SQLite implementation of the operation progress repository.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import date
from enum import Enum
from typing import Any, Optional

from sqlalchemy import and_, select
from sqlalchemy.exc import SQLAlchemyError

from petroleum_ops.core.exceptions import UnexpectedError
from petroleum_ops.infrastructure.local.database import OperationProgressORM, get_session_factory
from petroleum_ops.interfaces.operation_progress_repository import IOperationProgressRepository
from petroleum_ops.models.enums import OperationProgressStatus
from petroleum_ops.models.operation_progress import OperationProgress
from petroleum_ops.utils.datetime_utils import ensure_utc, now_utc


class SqliteOperationProgressRepository(IOperationProgressRepository):
    """SQLite implementation of operation progress repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    @asynccontextmanager
    async def _session(self):
        try:
            async with self._session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            raise UnexpectedError("Progress store is unavailable", details=str(exc)) from exc

    def _orm_to_model(self, orm: OperationProgressORM) -> OperationProgress:
        entry = OperationProgress.model_validate(orm, from_attributes=True)
        return entry.model_copy(
            update={
                "created_at": ensure_utc(entry.created_at),
                "updated_at": ensure_utc(entry.updated_at),
            }
        )

    async def _get_orm(self, session, entry_id: str) -> Optional[OperationProgressORM]:
        result = await session.execute(
            select(OperationProgressORM).where(
                and_(
                    OperationProgressORM.id == entry_id,
                    OperationProgressORM.is_deleted.is_(False),
                )
            )
        )
        return result.scalar_one_or_none()

    async def find_by_project(
        self,
        project_id: str,
        entry_date: Optional[date] = None,
        status: Optional[OperationProgressStatus] = None,
    ) -> list[OperationProgress]:
        conditions = [
            OperationProgressORM.project_id == project_id,
            OperationProgressORM.is_deleted.is_(False),
        ]
        if entry_date:
            conditions.append(OperationProgressORM.entry_date == entry_date)
        if status:
            conditions.append(OperationProgressORM.status == status.value)

        async with self._session() as session:
            result = await session.execute(
                select(OperationProgressORM)
                .where(and_(*conditions))
                .order_by(OperationProgressORM.entry_date.desc(), OperationProgressORM.created_at.desc())
            )
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def get_by_id(self, entry_id: str) -> Optional[OperationProgress]:
        async with self._session() as session:
            orm = await self._get_orm(session, entry_id)
            return self._orm_to_model(orm) if orm else None

    async def insert(self, entry: OperationProgress) -> OperationProgress:
        async with self._session() as session:
            data = entry.model_dump()
            data["status"] = entry.status.value
            orm = OperationProgressORM(**data)
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def update_by_id(self, entry_id: str, patch: dict[str, Any]) -> Optional[OperationProgress]:
        async with self._session() as session:
            orm = await self._get_orm(session, entry_id)
            if not orm:
                return None

            for field, value in patch.items():
                if isinstance(value, Enum):
                    value = value.value
                setattr(orm, field, value)

            orm.updated_at = now_utc()
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)
