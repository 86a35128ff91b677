"""Pydantic models (schemas) for the application."""

from petroleum_ops.models.common import ApiListResponse, ApiResponse, CamelModel, ErrorResponse
from petroleum_ops.models.enums import EventAction, OperationProgressStatus, ProgressStatus
from petroleum_ops.models.milestone import (
    Milestone,
    MilestoneCreate,
    MilestoneTask,
    MilestoneTaskCreate,
    MilestoneTaskUpdate,
    MilestoneUpdate,
)
from petroleum_ops.models.operation_progress import (
    OperationProgress,
    OperationProgressCreate,
    OperationProgressUpdate,
)
from petroleum_ops.models.progress import MilestoneProgress, ProgressReport, ProgressSummary

__all__ = [
    # Enums
    "ProgressStatus",
    "OperationProgressStatus",
    "EventAction",
    # Envelopes
    "CamelModel",
    "ApiResponse",
    "ApiListResponse",
    "ErrorResponse",
    # Milestone
    "Milestone",
    "MilestoneCreate",
    "MilestoneUpdate",
    "MilestoneTask",
    "MilestoneTaskCreate",
    "MilestoneTaskUpdate",
    # Progress
    "ProgressSummary",
    "MilestoneProgress",
    "ProgressReport",
    # Operation progress
    "OperationProgress",
    "OperationProgressCreate",
    "OperationProgressUpdate",
]
