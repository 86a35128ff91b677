"""
Enum definitions for the application.

These enums are used across models and provide type-safe status values.
"""

from enum import Enum


class ProgressStatus(str, Enum):
    """Status shared by milestones and milestone tasks."""

    PLANNED = "planned"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    DELAYED = "delayed"


class OperationProgressStatus(str, Enum):
    """
    Schedule position of an operation progress entry.

    Derived from variance (actual - planned):
    AHEAD = at least 5 points ahead of plan
    AT_RISK = 10 or more points behind plan
    BEHIND = behind plan, less than 10 points
    ON_TRACK = otherwise
    """

    ON_TRACK = "onTrack"
    BEHIND = "behind"
    AHEAD = "ahead"
    AT_RISK = "atRisk"


class EventAction(str, Enum):
    """Realtime event action."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
