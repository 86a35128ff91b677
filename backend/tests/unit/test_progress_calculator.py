"""
Unit tests for progress derivation.

Covers the overall percentage (in-progress tasks at half credit), per-status
counts, per-milestone completion and the advisory suggested status.
"""

from datetime import date, datetime, timezone

import pytest

from petroleum_ops.models.enums import ProgressStatus
from petroleum_ops.models.milestone import Milestone, MilestoneTask
from petroleum_ops.services.progress_calculator import (
    build_progress_report,
    milestone_completion,
    overall_percentage,
    round_half_up,
    suggest_milestone_status,
    summarize_progress,
)

TIMESTAMP = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _task(index: int, status: ProgressStatus, completion: int = 0, deleted: bool = False) -> MilestoneTask:
    return MilestoneTask(
        id=f"t{index}",
        name=f"Task {index}",
        status=status,
        completion_percentage=completion,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 31),
        is_deleted=deleted,
    )


def _milestone(
    milestone_id: str,
    tasks: list[MilestoneTask],
    status: ProgressStatus = ProgressStatus.PLANNED,
    deleted: bool = False,
) -> Milestone:
    return Milestone(
        id=milestone_id,
        project_id="p1",
        name=f"Milestone {milestone_id}",
        description="Rig move",
        planned_date=date(2024, 2, 1),
        status=status,
        tasks=tasks,
        created_at=TIMESTAMP,
        updated_at=TIMESTAMP,
        is_deleted=deleted,
    )


def test_one_task_per_status_rounds_half_up():
    milestone = _milestone(
        "ms1",
        [
            _task(1, ProgressStatus.COMPLETED),
            _task(2, ProgressStatus.IN_PROGRESS),
            _task(3, ProgressStatus.PLANNED),
            _task(4, ProgressStatus.DELAYED),
        ],
    )

    summary = summarize_progress([milestone])

    assert summary.overall == 38
    assert summary.completed == 1
    assert summary.in_progress == 1
    assert summary.planned == 1
    assert summary.delayed == 1


def test_no_tasks_is_zero_percent():
    summary = summarize_progress([_milestone("ms1", [])])

    assert summary.overall == 0
    assert summary.completed == summary.in_progress == summary.planned == summary.delayed == 0


def test_no_milestones_is_zero_percent():
    assert summarize_progress([]).overall == 0


@pytest.mark.parametrize(
    "completed,in_progress,other,expected",
    [
        (0, 0, 3, 0),
        (3, 0, 0, 100),
        (0, 2, 0, 50),
        (1, 0, 2, 33),
        (2, 1, 0, 83),
        (1, 1, 6, 19),
    ],
)
def test_overall_matches_half_credit_formula(completed, in_progress, other, expected):
    tasks = (
        [_task(i, ProgressStatus.COMPLETED) for i in range(completed)]
        + [_task(100 + i, ProgressStatus.IN_PROGRESS) for i in range(in_progress)]
        + [_task(200 + i, ProgressStatus.PLANNED) for i in range(other)]
    )

    summary = summarize_progress([_milestone("ms1", tasks)])

    assert summary.overall == expected
    assert overall_percentage(completed, in_progress, len(tasks)) == expected


def test_tasks_are_flattened_across_milestones():
    first = _milestone("ms1", [_task(1, ProgressStatus.COMPLETED)])
    second = _milestone("ms2", [_task(2, ProgressStatus.PLANNED), _task(3, ProgressStatus.IN_PROGRESS)])

    summary = summarize_progress([first, second])

    # (1 + 0.5) / 3 * 100 = 50
    assert summary.overall == 50
    assert summary.completed == 1
    assert summary.planned == 1
    assert summary.in_progress == 1


def test_deleted_tasks_and_milestones_are_ignored():
    live = _milestone(
        "ms1",
        [_task(1, ProgressStatus.COMPLETED), _task(2, ProgressStatus.PLANNED, deleted=True)],
    )
    gone = _milestone("ms2", [_task(3, ProgressStatus.PLANNED)], deleted=True)

    summary = summarize_progress([live, gone])

    assert summary.overall == 100
    assert summary.planned == 0


def test_round_half_up_differs_from_bankers_rounding():
    assert round_half_up(12.5) == 13
    assert round_half_up(37.5) == 38
    assert round_half_up(37.4) == 37


def test_milestone_completion_is_mean_of_task_percentages():
    milestone = _milestone(
        "ms1",
        [
            _task(1, ProgressStatus.IN_PROGRESS, completion=50),
            _task(2, ProgressStatus.COMPLETED, completion=100),
            _task(3, ProgressStatus.PLANNED, completion=0),
        ],
    )

    assert milestone_completion(milestone) == 50
    assert milestone_completion(_milestone("empty", [])) == 0


class TestSuggestedStatus:
    """Advisory milestone status derived from tasks."""

    def test_all_completed(self):
        milestone = _milestone("ms1", [_task(1, ProgressStatus.COMPLETED), _task(2, ProgressStatus.COMPLETED)])
        assert suggest_milestone_status(milestone) == ProgressStatus.COMPLETED

    def test_any_delayed_wins_over_completed(self):
        milestone = _milestone("ms1", [_task(1, ProgressStatus.COMPLETED), _task(2, ProgressStatus.DELAYED)])
        assert suggest_milestone_status(milestone) == ProgressStatus.DELAYED

    def test_some_completed_is_in_progress(self):
        milestone = _milestone("ms1", [_task(1, ProgressStatus.COMPLETED), _task(2, ProgressStatus.PLANNED)])
        assert suggest_milestone_status(milestone) == ProgressStatus.IN_PROGRESS

    def test_nothing_completed_is_planned(self):
        milestone = _milestone("ms1", [_task(1, ProgressStatus.IN_PROGRESS), _task(2, ProgressStatus.PLANNED)])
        assert suggest_milestone_status(milestone) == ProgressStatus.PLANNED

    def test_without_tasks_keeps_own_status(self):
        milestone = _milestone("ms1", [], status=ProgressStatus.DELAYED)
        assert suggest_milestone_status(milestone) == ProgressStatus.DELAYED


def test_report_contains_per_milestone_breakdown():
    milestone = _milestone(
        "ms1",
        [
            _task(1, ProgressStatus.COMPLETED, completion=100),
            _task(2, ProgressStatus.IN_PROGRESS, completion=40),
        ],
    )

    report = build_progress_report([milestone])

    assert report.overall == 75
    assert report.total == 2
    assert len(report.milestones) == 1
    entry = report.milestones[0]
    assert entry.milestone_id == "ms1"
    assert entry.status == ProgressStatus.PLANNED
    assert entry.suggested_status == ProgressStatus.IN_PROGRESS
    assert entry.completion == 70
    assert entry.task_count == 2


def test_report_serializes_camel_case():
    report = build_progress_report([_milestone("ms1", [_task(1, ProgressStatus.IN_PROGRESS)])])

    data = report.model_dump(mode="json", by_alias=True)

    assert data["inProgress"] == 1
    assert data["milestones"][0]["suggestedStatus"] == "planned"
    assert data["milestones"][0]["taskCount"] == 1
