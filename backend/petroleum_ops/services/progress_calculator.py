"""
Progress calculation utilities.

Pure functions over an in-memory milestone set. Results are recomputed on
every call and never stored.
"""

from __future__ import annotations

import math
from typing import Iterable

from petroleum_ops.models.enums import ProgressStatus
from petroleum_ops.models.milestone import Milestone, MilestoneTask
from petroleum_ops.models.progress import MilestoneProgress, ProgressReport, ProgressSummary

# In-progress tasks count for half a completed task.
IN_PROGRESS_WEIGHT = 0.5


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (37.5 -> 38, 12.5 -> 13)."""
    return int(math.floor(value + 0.5))


def _flatten_tasks(milestones: Iterable[Milestone]) -> list[MilestoneTask]:
    tasks: list[MilestoneTask] = []
    for milestone in milestones:
        if milestone.is_deleted:
            continue
        tasks.extend(milestone.active_tasks())
    return tasks


def _count_by_status(tasks: Iterable[MilestoneTask]) -> dict[ProgressStatus, int]:
    counts = {status: 0 for status in ProgressStatus}
    for task in tasks:
        counts[task.status] += 1
    return counts


def overall_percentage(completed: int, in_progress: int, total: int) -> int:
    if total <= 0:
        return 0
    ratio = (completed + IN_PROGRESS_WEIGHT * in_progress) / total
    return round_half_up(ratio * 100)


def summarize_progress(milestones: Iterable[Milestone]) -> ProgressSummary:
    """
    Derive overall progress and per-status counts across all milestones.

    Args:
        milestones: Milestones of one project (deleted milestones/tasks are skipped)

    Returns:
        ProgressSummary with overall = round((completed + 0.5 * in_progress) / total * 100),
        or 0 when there are no tasks.
    """
    tasks = _flatten_tasks(milestones)
    counts = _count_by_status(tasks)
    return ProgressSummary(
        overall=overall_percentage(
            counts[ProgressStatus.COMPLETED],
            counts[ProgressStatus.IN_PROGRESS],
            len(tasks),
        ),
        completed=counts[ProgressStatus.COMPLETED],
        in_progress=counts[ProgressStatus.IN_PROGRESS],
        planned=counts[ProgressStatus.PLANNED],
        delayed=counts[ProgressStatus.DELAYED],
    )


def milestone_completion(milestone: Milestone) -> int:
    """Mean completion percentage of a milestone's tasks, 0 without tasks."""
    tasks = milestone.active_tasks()
    if not tasks:
        return 0
    weight = sum(task.completion_percentage / 100 for task in tasks)
    return round_half_up(weight / len(tasks) * 100)


def suggest_milestone_status(milestone: Milestone) -> ProgressStatus:
    """
    Status implied by a milestone's tasks.

    Advisory only: it is reported next to the stored status and never written
    back. A milestone without tasks keeps its own status.
    """
    tasks = milestone.active_tasks()
    if not tasks:
        return milestone.status

    counts = _count_by_status(tasks)
    if counts[ProgressStatus.COMPLETED] == len(tasks):
        return ProgressStatus.COMPLETED
    if counts[ProgressStatus.DELAYED] > 0:
        return ProgressStatus.DELAYED
    if counts[ProgressStatus.COMPLETED] > 0:
        return ProgressStatus.IN_PROGRESS
    return ProgressStatus.PLANNED


def build_progress_report(milestones: Iterable[Milestone]) -> ProgressReport:
    """Project summary plus a per-milestone breakdown."""
    active = [milestone for milestone in milestones if not milestone.is_deleted]
    summary = summarize_progress(active)
    return ProgressReport(
        **summary.model_dump(),
        total=summary.completed + summary.in_progress + summary.planned + summary.delayed,
        milestones=[
            MilestoneProgress(
                milestone_id=milestone.id,
                name=milestone.name,
                status=milestone.status,
                suggested_status=suggest_milestone_status(milestone),
                completion=milestone_completion(milestone),
                task_count=len(milestone.active_tasks()),
            )
            for milestone in active
        ],
    )
