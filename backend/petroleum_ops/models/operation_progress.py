"""
Operation progress model definitions.

Dated planned-vs-actual progress entries recorded by site operations.
Variance and status are always derived from the two percentages.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from petroleum_ops.models.common import CamelModel, ISODate
from petroleum_ops.models.enums import OperationProgressStatus
from petroleum_ops.utils.datetime_utils import today_utc


class OperationProgressBase(CamelModel):
    """Base operation progress fields."""

    milestone: str = Field(..., min_length=1, max_length=200, description="Milestone label")
    planned_progress: float = Field(..., ge=0, le=100)
    actual_progress: float = Field(..., ge=0, le=100)
    challenges: Optional[str] = Field(None, max_length=2000)
    actions: Optional[str] = Field(None, max_length=2000)
    notes: Optional[str] = Field(None, max_length=2000)


class OperationProgressCreate(OperationProgressBase):
    """Schema for creating a progress entry."""

    entry_date: ISODate = Field(default_factory=today_utc, alias="date", description="Progress date")


class OperationProgressUpdate(CamelModel):
    """Schema for updating a progress entry."""

    entry_date: Optional[ISODate] = Field(None, alias="date")
    milestone: Optional[str] = Field(None, min_length=1, max_length=200)
    planned_progress: Optional[float] = Field(None, ge=0, le=100)
    actual_progress: Optional[float] = Field(None, ge=0, le=100)
    challenges: Optional[str] = Field(None, max_length=2000)
    actions: Optional[str] = Field(None, max_length=2000)
    notes: Optional[str] = Field(None, max_length=2000)


class OperationProgress(OperationProgressBase):
    """Complete progress entry model."""

    id: str
    project_id: str
    entry_date: ISODate = Field(..., alias="date")
    variance: float = 0
    status: OperationProgressStatus = OperationProgressStatus.ON_TRACK
    updated_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    is_deleted: bool = False
