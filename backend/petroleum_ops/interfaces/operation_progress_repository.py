"""
Operation progress repository interface.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Optional

from petroleum_ops.models.enums import OperationProgressStatus
from petroleum_ops.models.operation_progress import OperationProgress


class IOperationProgressRepository(ABC):
    """Interface for operation progress persistence."""

    @abstractmethod
    async def find_by_project(
        self,
        project_id: str,
        entry_date: Optional[date] = None,
        status: Optional[OperationProgressStatus] = None,
    ) -> list[OperationProgress]:
        """List non-deleted entries of a project, newest date first."""
        pass

    @abstractmethod
    async def get_by_id(self, entry_id: str) -> Optional[OperationProgress]:
        """Get a non-deleted entry by ID, or None."""
        pass

    @abstractmethod
    async def insert(self, entry: OperationProgress) -> OperationProgress:
        """Insert a new entry."""
        pass

    @abstractmethod
    async def update_by_id(self, entry_id: str, patch: dict[str, Any]) -> Optional[OperationProgress]:
        """Apply a field patch to one entry; None if it does not exist or is deleted."""
        pass
