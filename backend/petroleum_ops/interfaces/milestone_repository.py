"""
Milestone repository interface.

Defines the contract for milestone document persistence. A milestone is one
document with its tasks embedded; every write replaces fields of a single
document.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from petroleum_ops.models.milestone import Milestone, MilestoneTask


class IMilestoneRepository(ABC):
    """Interface for milestone repository operations."""

    @abstractmethod
    async def find_by_project(self, project_id: str) -> list[Milestone]:
        """
        List non-deleted milestones of a project.

        Args:
            project_id: Project ID

        Returns:
            Milestones ordered by planned date (ascending)
        """
        pass

    @abstractmethod
    async def get_by_id(self, milestone_id: str) -> Optional[Milestone]:
        """Get a non-deleted milestone by ID, or None."""
        pass

    @abstractmethod
    async def insert(self, milestone: Milestone) -> Milestone:
        """Insert a new milestone document."""
        pass

    @abstractmethod
    async def update_by_id(self, milestone_id: str, patch: dict[str, Any]) -> Optional[Milestone]:
        """
        Apply a field patch to one milestone document.

        Args:
            milestone_id: Milestone ID
            patch: Attribute name -> new value (``tasks`` replaces the whole list)

        Returns:
            Updated milestone, or None if it does not exist or is deleted
        """
        pass

    @abstractmethod
    async def update_tasks(
        self,
        milestone_id: str,
        mutate: Callable[[list[MilestoneTask]], list[MilestoneTask]],
        patch: Optional[dict[str, Any]] = None,
    ) -> Optional[Milestone]:
        """
        Read, transform and write back a milestone's task list as one unit.

        Concurrent calls on the same milestone never lose each other's
        changes. Exceptions raised by ``mutate`` abort the write.

        Args:
            milestone_id: Milestone ID
            mutate: Receives the stored tasks (deleted ones included) and
                returns the new list
            patch: Extra milestone fields written with the tasks

        Returns:
            Updated milestone, or None if it does not exist or is deleted
        """
        pass
