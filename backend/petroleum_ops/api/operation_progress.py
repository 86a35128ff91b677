"""
Operation progress API endpoints.

Dated planned-vs-actual progress entries. Mounted under ``/api/projects``.
"""

from typing import Optional

from fastapi import APIRouter, Query, status

from petroleum_ops.api.deps import Actor, OperationProgressSvc
from petroleum_ops.models.common import ApiListResponse, ApiResponse, ISODate
from petroleum_ops.models.operation_progress import (
    OperationProgress,
    OperationProgressCreate,
    OperationProgressUpdate,
)

router = APIRouter()


@router.get("/{project_id}/progress", response_model=ApiListResponse[OperationProgress])
async def list_progress_entries(
    project_id: str,
    service: OperationProgressSvc,
    entry_date: Optional[ISODate] = Query(None, alias="date", description="Only entries of this date"),
    status_filter: Optional[str] = Query(None, alias="status", description="Status or 'all'"),
):
    """List progress entries for a project, newest first."""
    entries = await service.list_entries(project_id, entry_date, status_filter)
    return ApiListResponse[OperationProgress](count=len(entries), data=entries)


@router.post(
    "/{project_id}/progress",
    response_model=ApiResponse[OperationProgress],
    status_code=status.HTTP_201_CREATED,
)
async def create_progress_entry(
    project_id: str,
    entry: OperationProgressCreate,
    service: OperationProgressSvc,
    actor: Actor,
):
    """Record a progress entry."""
    created = await service.create_entry(project_id, entry, actor)
    return ApiResponse[OperationProgress](data=created)


@router.put("/progress/{progress_id}", response_model=ApiResponse[OperationProgress])
async def update_progress_entry(
    progress_id: str,
    entry: OperationProgressUpdate,
    service: OperationProgressSvc,
    actor: Actor,
):
    """Update a progress entry."""
    updated = await service.update_entry(progress_id, entry, actor)
    return ApiResponse[OperationProgress](data=updated)


@router.delete("/progress/{progress_id}", response_model=ApiResponse[dict])
async def delete_progress_entry(progress_id: str, service: OperationProgressSvc, actor: Actor):
    """Soft-delete a progress entry."""
    await service.delete_entry(progress_id, actor)
    return ApiResponse[dict](data={})
