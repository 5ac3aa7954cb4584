# GoGoTime - Approval Workflow
# Allowed status moves for timesheets and timesheet entries

import uuid
from typing import Optional

from gogotime.errors import InvalidStateTransitionError, ValidationError
from gogotime.models import TimesheetStatus, HistoryAction, utcnow


# Forward-only; REJECTED and INVOICED are terminal
TRANSITIONS: dict[TimesheetStatus, frozenset[TimesheetStatus]] = {
    TimesheetStatus.DRAFT: frozenset({TimesheetStatus.SUBMITTED}),
    TimesheetStatus.SUBMITTED: frozenset({TimesheetStatus.APPROVED, TimesheetStatus.REJECTED}),
    TimesheetStatus.APPROVED: frozenset({TimesheetStatus.INVOICED}),
    TimesheetStatus.REJECTED: frozenset(),
    TimesheetStatus.INVOICED: frozenset(),
}

# Source state of each target; every target has exactly one
SOURCE_STATE = {
    target: source
    for source, targets in TRANSITIONS.items()
    for target in targets
}

HISTORY_ACTIONS = {
    TimesheetStatus.SUBMITTED: HistoryAction.SUBMITTED,
    TimesheetStatus.APPROVED: HistoryAction.APPROVED,
    TimesheetStatus.REJECTED: HistoryAction.REJECTED,
    TimesheetStatus.INVOICED: HistoryAction.INVOICED,
}


def can_transition(current: TimesheetStatus, target: TimesheetStatus) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


def ensure_transition(resource: str, current: TimesheetStatus, target: TimesheetStatus) -> None:
    """
    Raise InvalidStateTransitionError unless current -> target is allowed.

    Called by every transition method against the freshly loaded record.
    """
    if not can_transition(current, target):
        raise InvalidStateTransitionError(resource, current.value, target.value)


def apply_transition(
    record,
    target: TimesheetStatus,
    actor_id: uuid.UUID,
    reason: Optional[str] = None,
) -> TimesheetStatus:
    """
    Move a timesheet or entry to ``target`` and stamp who/when.

    Returns the previous status.
    """
    ensure_transition(type(record).__name__, record.status, target)

    previous = record.status
    now = utcnow()

    if target == TimesheetStatus.SUBMITTED:
        record.submitted_at = now
        record.submitted_by_user_id = actor_id
    elif target == TimesheetStatus.APPROVED:
        record.approved_at = now
        record.approver_id = actor_id
    elif target == TimesheetStatus.REJECTED:
        if not (reason or "").strip():
            raise ValidationError.single("reason", "A rejection reason is required", "missing")
        record.rejected_at = now
        record.approver_id = actor_id
        record.rejection_reason = reason.strip()
    elif target == TimesheetStatus.INVOICED:
        record.invoiced_at = now

    record.status = target
    return previous
