"""
Status transition policy for milestones and milestone tasks.

The default policy accepts any assignment. Strict mode enforces
planned -> in-progress -> completed, with delayed reachable from any open
state and completed terminal.
"""

from petroleum_ops.core.exceptions import ValidationError
from petroleum_ops.models.enums import ProgressStatus

ALLOWED_TRANSITIONS: dict[ProgressStatus, frozenset[ProgressStatus]] = {
    ProgressStatus.PLANNED: frozenset({ProgressStatus.IN_PROGRESS, ProgressStatus.DELAYED}),
    ProgressStatus.IN_PROGRESS: frozenset({ProgressStatus.COMPLETED, ProgressStatus.DELAYED}),
    ProgressStatus.DELAYED: frozenset({ProgressStatus.IN_PROGRESS, ProgressStatus.COMPLETED}),
    ProgressStatus.COMPLETED: frozenset(),
}


def is_transition_allowed(current: ProgressStatus, new: ProgressStatus) -> bool:
    if current == new:
        return True
    return new in ALLOWED_TRANSITIONS[current]


class StatusTransitionPolicy:
    """Validates status changes; permissive unless ``strict`` is set."""

    def __init__(self, strict: bool = False):
        self.strict = strict

    def check(self, current: ProgressStatus, new: ProgressStatus, subject: str = "Status") -> None:
        """
        Raise ValidationError for an illegal transition in strict mode.

        Args:
            current: Stored status
            new: Requested status
            subject: Label used in the error message (e.g. "Milestone", "Task")
        """
        if not self.strict:
            return
        if not is_transition_allowed(current, new):
            raise ValidationError(
                f"{subject} status cannot change from '{current.value}' to '{new.value}'",
                details={"from": current.value, "to": new.value},
            )
