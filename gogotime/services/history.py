# GoGoTime - History Service
# Append-only change trail for timesheets, entries and other business records

from datetime import datetime, date, timedelta
from decimal import Decimal
import enum
import uuid
from typing import Optional, Any

from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.inspection import inspect

from gogotime.models import (
    User,
    TimesheetHistory,
    HistoryTargetType,
    HistoryAction,
    create_history_entry,
    utcnow,
)
from gogotime.models.base import Base


class HistoryService:
    """
    Writes TimesheetHistory rows in the caller's unit of work.

    Usage:
        history = HistoryService(db, current_user, client_ip)

        # For creates - call after flush so the row has its id
        repo.add(entry)
        history.log_created(HistoryTargetType.TIMESHEET_ENTRY, entry)

        # For updates - capture the state before modifying
        old_state = history.capture_state(entry)
        repo.update(entry, changes)
        history.log_updated(HistoryTargetType.TIMESHEET_ENTRY, entry, old_state)

        # Workflow steps
        history.log_transition(HistoryTargetType.TIMESHEET, sheet, HistoryAction.REJECTED, reason)
    """

    # Bookkeeping columns left out of diffs
    EXCLUDED_FIELDS = {
        "password_hash",
        "version",
        "updated_at",
        "updated_by_user_id",
    }

    def __init__(
        self,
        db: Session,
        actor: User,
        ip_address: Optional[str] = None,
    ):
        self.db = db
        self.actor = actor
        self.ip_address = ip_address

    def _serialize_value(self, value: Any) -> Any:
        """Convert a column value to something JSON can hold."""
        if value is None:
            return None
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        if isinstance(value, Decimal):
            return float(value)
        if isinstance(value, enum.Enum):
            return value.value
        if isinstance(value, uuid.UUID):
            return str(value)
        if isinstance(value, (int, float, str, bool)):
            return value
        return str(value)

    def capture_state(self, instance: Base) -> dict[str, Any]:
        """
        Snapshot of every mapped column, keyed by attribute name.

        Call this BEFORE making changes to capture the "old" state.
        """
        mapper = inspect(type(instance))
        state = {}

        for attr in mapper.column_attrs:
            if attr.key in self.EXCLUDED_FIELDS:
                continue
            state[attr.key] = self._serialize_value(getattr(instance, attr.key))

        return state

    @staticmethod
    def diff_states(old_state: dict[str, Any], new_state: dict[str, Any]) -> dict[str, dict[str, Any]]:
        """{field: {"old": ..., "new": ...}} for every field that differs."""
        changes = {}
        for key in sorted(set(old_state) | set(new_state)):
            old_val = old_state.get(key)
            new_val = new_state.get(key)
            if old_val != new_val:
                changes[key] = {"old": old_val, "new": new_val}
        return changes

    def _record(
        self,
        target_type: HistoryTargetType,
        instance: Base,
        action: HistoryAction,
        diff: Optional[dict] = None,
        reason: Optional[str] = None,
        metadata: Optional[dict] = None,
    ) -> TimesheetHistory:
        entry = create_history_entry(
            company_id=instance.company_id,
            target_type=target_type,
            target_id=instance.id,
            action=action,
            actor_user_id=self.actor.id,
            user_id=getattr(instance, "user_id", None),
            diff=diff,
            metadata=metadata,
            reason=reason,
            ip_address=self.ip_address,
        )
        self.db.add(entry)
        return entry

    def log_created(self, target_type: HistoryTargetType, instance: Base) -> TimesheetHistory:
        return self._record(target_type, instance, HistoryAction.CREATED, diff=self.capture_state(instance))

    def log_updated(
        self,
        target_type: HistoryTargetType,
        instance: Base,
        old_state: dict[str, Any],
    ) -> Optional[TimesheetHistory]:
        """Returns None when nothing actually changed."""
        changes = self.diff_states(old_state, self.capture_state(instance))
        if not changes:
            return None
        return self._record(target_type, instance, HistoryAction.UPDATED, diff=changes)

    def log_deleted(self, target_type: HistoryTargetType, instance: Base) -> TimesheetHistory:
        """Call BEFORE soft-deleting so the snapshot shows the record as it was."""
        return self._record(target_type, instance, HistoryAction.DELETED, diff=self.capture_state(instance))

    def log_transition(
        self,
        target_type: HistoryTargetType,
        instance: Base,
        action: HistoryAction,
        reason: Optional[str] = None,
        from_status: Optional[str] = None,
    ) -> TimesheetHistory:
        metadata = None
        if from_status is not None:
            metadata = {"from": from_status, "to": self._serialize_value(getattr(instance, "status", None))}
        return self._record(target_type, instance, action, reason=reason, metadata=metadata)


class HistoryQuery:
    """
    Read side of the history table, always within one company.

    Usage:
        query = HistoryQuery(db, company_id)
        rows = query.get_record_history(HistoryTargetType.TIMESHEET, sheet.id)
    """

    def __init__(self, db: Session, company_id: uuid.UUID):
        self.db = db
        self.company_id = company_id

    def get_record_history(
        self,
        target_type: HistoryTargetType,
        target_id: uuid.UUID,
    ) -> list[TimesheetHistory]:
        """Oldest first."""
        return list(self.db.execute(
            select(TimesheetHistory)
            .where(TimesheetHistory.company_id == self.company_id)
            .where(TimesheetHistory.target_type == target_type)
            .where(TimesheetHistory.target_id == target_id)
            .order_by(TimesheetHistory.occurred_at.asc())
        ).scalars().all())

    def get_changes_by_user(
        self,
        actor_user_id: uuid.UUID,
        limit: int = 100,
        offset: int = 0,
    ) -> list[TimesheetHistory]:
        """Newest first."""
        return list(self.db.execute(
            select(TimesheetHistory)
            .where(TimesheetHistory.company_id == self.company_id)
            .where(TimesheetHistory.actor_user_id == actor_user_id)
            .order_by(TimesheetHistory.occurred_at.desc())
            .limit(limit)
            .offset(offset)
        ).scalars().all())

    def get_recent_changes(
        self,
        hours: int = 24,
        target_type: Optional[HistoryTargetType] = None,
        action: Optional[HistoryAction] = None,
        limit: int = 100,
    ) -> list[TimesheetHistory]:
        cutoff = utcnow() - timedelta(hours=hours)

        query = (
            select(TimesheetHistory)
            .where(TimesheetHistory.company_id == self.company_id)
            .where(TimesheetHistory.occurred_at >= cutoff)
        )

        if target_type is not None:
            query = query.where(TimesheetHistory.target_type == target_type)

        if action is not None:
            query = query.where(TimesheetHistory.action == action)

        return list(self.db.execute(
            query.order_by(TimesheetHistory.occurred_at.desc()).limit(limit)
        ).scalars().all())
