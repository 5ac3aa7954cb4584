# GoGoTime - Timesheet Entry Service
# Time logging with validation, ownership checks and the approval workflow

import logging
import uuid
from datetime import date
from typing import Optional, Sequence

from gogotime.errors import DomainError, NotFoundError, ValidationError
from gogotime.models import (
    ActionCode,
    Timesheet,
    TimesheetEntry,
    TimesheetStatus,
    HistoryTargetType,
)
from gogotime.permissions import (
    CREATE_OTHER_TIMESHEET_ENTRY,
    UPDATE_OTHER_TIMESHEET_ENTRY,
    DELETE_OTHER_TIMESHEET_ENTRY,
    VIEW_OTHER_TIMESHEET,
    SUBMIT_OTHER_TIMESHEET,
    APPROVE_TIMESHEET,
    REJECT_TIMESHEET,
    INVOICE_TIMESHEET,
)
from gogotime.repositories import (
    ActionCodeRepository,
    TimesheetEntryRepository,
    TimesheetRepository,
    UserRepository,
)
from gogotime.schemas import TimesheetEntryCreate, TimesheetEntryUpdate, RejectRequest
from gogotime.schemas.timesheet import MINUTES_PER_DAY
from gogotime.services.base import TenantService
from gogotime.services.workflow import apply_transition, HISTORY_ACTIONS
from gogotime.validation import validate_dto


logger = logging.getLogger(__name__)

# Statuses in which an entry may still be removed
DELETABLE_STATUSES = {TimesheetStatus.DRAFT, TimesheetStatus.REJECTED}

# Non-nullable columns an update may set but not clear
REQUIRED_FIELDS = ("action_code_id", "work_mode", "country", "duration_min", "day")


class TimesheetEntryService(TenantService):
    """
    Service for managing timesheet entries.

    Entries can be logged with started_at/ended_at (duration derived) or
    with duration_min and day. Only DRAFT entries can be edited; DRAFT and
    REJECTED entries can be deleted. The parent timesheet's total_minutes
    is recomputed after every change.

    Usage:
        service = TimesheetEntryService(db, current_user, request.client.host)

        entry = service.create_entry({
            "action_code_id": code.id,
            "country": "FR",
            "started_at": "2025-03-03T09:00:00",
            "ended_at": "2025-03-03T12:30:00",
        })

        service.submit_entry(entry.id)
        TimesheetEntryService(db, manager).approve_entry(entry.id)
    """

    def __init__(self, db, current_user, ip_address=None):
        super().__init__(db, current_user, ip_address)
        self.repo = TimesheetEntryRepository(db)
        self.timesheets = TimesheetRepository(db)
        self.action_codes = ActionCodeRepository(db)
        self.users = UserRepository(db)

    # ---- reads ----------------------------------------------------------

    def get_entry(self, entry_id: uuid.UUID) -> TimesheetEntry:
        entry = self.get_or_404(self.repo, entry_id, "TimesheetEntry")
        self.ensure_can_act_on(entry.user_id, VIEW_OTHER_TIMESHEET, "You may only view your own time entries")
        return entry

    def list_entries(
        self,
        user_id: Optional[uuid.UUID] = None,
        timesheet_id: Optional[uuid.UUID] = None,
        status: Optional[TimesheetStatus] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Sequence[TimesheetEntry]:
        if timesheet_id is not None:
            sheet = self.get_or_404(self.timesheets, timesheet_id, "Timesheet")
            owner_id = sheet.user_id
        else:
            owner_id = user_id or self.current_user.id

        if owner_id != self.current_user.id:
            self.ensure_can_act_on(owner_id, VIEW_OTHER_TIMESHEET, "You may only view your own time entries")

        return self.repo.search(
            self.company_id,
            user_id=owner_id,
            timesheet_id=timesheet_id,
            status=status,
            date_from=date_from,
            date_to=date_to,
        )

    # ---- create / update / delete --------------------------------------

    def create_entry(self, data) -> TimesheetEntry:
        """
        Log time.

        Raises:
            ValidationError: bad payload
            ForbiddenError: logging for someone else without create_other_timesheet_entry
            NotFoundError: user, action code or timesheet not in the company
            DomainError: action code closed for logging, or timesheet not usable
        """
        dto = validate_dto(TimesheetEntryCreate, data)
        owner_id = dto.user_id or self.current_user.id

        self.ensure_can_act_on(
            owner_id, CREATE_OTHER_TIMESHEET_ENTRY,
            "You may only log your own time",
        )

        if owner_id != self.current_user.id and self.users.find_by_id_in_company(owner_id, self.company_id) is None:
            raise NotFoundError("User", owner_id)

        self._get_loggable_action_code(dto.action_code_id)

        sheet = None
        if dto.timesheet_id is not None:
            sheet = self._get_open_timesheet(dto.timesheet_id, owner_id, dto.day)

        entry = TimesheetEntry(
            company_id=self.company_id,
            user_id=owner_id,
            timesheet_id=dto.timesheet_id,
            action_code_id=dto.action_code_id,
            work_mode=dto.work_mode,
            country=dto.country,
            day=dto.day,
            note=dto.note,
            status=TimesheetStatus.DRAFT,
        )

        if dto.started_at is not None:
            entry.set_times_and_compute_duration(dto.started_at, dto.ended_at)
        else:
            entry.duration_min = dto.duration_min

        self.repo.add(entry, self.current_user.id)
        self.history.log_created(HistoryTargetType.TIMESHEET_ENTRY, entry)

        if sheet is not None:
            self._refresh_total(sheet)

        return entry

    def update_entry(self, entry_id: uuid.UUID, data) -> TimesheetEntry:
        """Edit a DRAFT entry. Only provided fields change."""
        dto = validate_dto(TimesheetEntryUpdate, data)
        entry = self.get_or_404(self.repo, entry_id, "TimesheetEntry")

        self.ensure_can_act_on(
            entry.user_id, UPDATE_OTHER_TIMESHEET_ENTRY,
            "You may only edit your own time entries",
        )

        if entry.status != TimesheetStatus.DRAFT:
            raise DomainError(
                f"Only DRAFT entries can be edited (entry is {entry.status.value})",
                {"status": entry.status.value},
            )

        changes = dto.model_dump(exclude_unset=True, exclude={"version"})

        for field in REQUIRED_FIELDS:
            if field in changes and changes[field] is None:
                raise ValidationError.single(field, f"{field} cannot be null", "missing")

        if changes.get("action_code_id") is not None:
            self._get_loggable_action_code(changes["action_code_id"])

        # Times: merge with the stored values and derive the duration again
        if "started_at" in changes or "ended_at" in changes:
            started_at = changes.pop("started_at", entry.started_at)
            ended_at = changes.pop("ended_at", entry.ended_at)
            if started_at is None or ended_at is None:
                raise ValidationError.single("ended_at", "started_at and ended_at must be given together")
            if ended_at <= started_at:
                raise ValidationError.single("ended_at", "ended_at must be after started_at")
            minutes = int((ended_at - started_at).total_seconds() // 60)
            if minutes > MINUTES_PER_DAY:
                raise ValidationError.single("ended_at", "an entry cannot exceed 24 hours")
            changes["started_at"] = started_at
            changes["ended_at"] = ended_at
            changes["duration_min"] = minutes
            changes.setdefault("day", started_at.date())
        elif "duration_min" in changes:
            # A bare duration replaces any recorded start/end
            changes["started_at"] = None
            changes["ended_at"] = None

        sheet = None
        if entry.timesheet_id is not None:
            sheet = self.timesheets.find_by_id_in_company(entry.timesheet_id, self.company_id)
            new_day = changes.get("day", entry.day)
            if sheet is not None and not sheet.covers(new_day):
                raise DomainError(
                    "Entry day falls outside its timesheet period",
                    {"day": str(new_day)},
                )

        old_state = self.history.capture_state(entry)
        self.repo.update(entry, changes, self.current_user.id, expected_version=dto.version)
        self.history.log_updated(HistoryTargetType.TIMESHEET_ENTRY, entry, old_state)

        if sheet is not None:
            self._refresh_total(sheet)

        return self.reload(entry)

    def delete_entry(self, entry_id: uuid.UUID) -> TimesheetEntry:
        entry = self.get_or_404(self.repo, entry_id, "TimesheetEntry")

        self.ensure_can_act_on(
            entry.user_id, DELETE_OTHER_TIMESHEET_ENTRY,
            "You may only delete your own time entries",
        )

        if entry.status not in DELETABLE_STATUSES:
            raise DomainError(
                f"Entries in {entry.status.value} cannot be deleted",
                {"status": entry.status.value},
            )

        self.history.log_deleted(HistoryTargetType.TIMESHEET_ENTRY, entry)
        self.repo.soft_delete(entry, self.current_user.id)
        logger.info("Timesheet entry %s deleted by %s", entry.id, self.current_user.id)

        if entry.timesheet_id is not None:
            sheet = self.timesheets.find_by_id_in_company(entry.timesheet_id, self.company_id)
            if sheet is not None:
                self._refresh_total(sheet)

        return entry

    # ---- workflow -------------------------------------------------------

    def submit_entry(self, entry_id: uuid.UUID) -> TimesheetEntry:
        entry = self.get_or_404(self.repo, entry_id, "TimesheetEntry")
        self.ensure_can_act_on(entry.user_id, SUBMIT_OTHER_TIMESHEET, "You may only submit your own time entries")
        return self._transition(entry, TimesheetStatus.SUBMITTED)

    def approve_entry(self, entry_id: uuid.UUID) -> TimesheetEntry:
        entry = self.get_or_404(self.repo, entry_id, "TimesheetEntry")
        self.require_permission(APPROVE_TIMESHEET)
        return self._transition(entry, TimesheetStatus.APPROVED)

    def reject_entry(self, entry_id: uuid.UUID, data) -> TimesheetEntry:
        dto = validate_dto(RejectRequest, data)
        entry = self.get_or_404(self.repo, entry_id, "TimesheetEntry")
        self.require_permission(REJECT_TIMESHEET)
        return self._transition(entry, TimesheetStatus.REJECTED, dto.reason)

    def invoice_entry(self, entry_id: uuid.UUID) -> TimesheetEntry:
        entry = self.get_or_404(self.repo, entry_id, "TimesheetEntry")
        self.require_permission(INVOICE_TIMESHEET)
        return self._transition(entry, TimesheetStatus.INVOICED)

    def _transition(self, entry: TimesheetEntry, target: TimesheetStatus, reason: Optional[str] = None) -> TimesheetEntry:
        previous = apply_transition(entry, target, self.current_user.id, reason)
        self.repo.touch(entry, self.current_user.id)
        self.history.log_transition(
            HistoryTargetType.TIMESHEET_ENTRY, entry, HISTORY_ACTIONS[target], reason, previous.value
        )
        self.db.flush()
        logger.info(
            "Timesheet entry %s %s -> %s by %s",
            entry.id, previous.value, target.value, self.current_user.id,
        )
        return self.reload(entry)

    # ---- helpers --------------------------------------------------------

    def _get_loggable_action_code(self, action_code_id: uuid.UUID) -> ActionCode:
        code = self.get_or_404(self.action_codes, action_code_id, "ActionCode")
        if not code.allow_time_logging:
            raise DomainError(
                f"Action code {code.code} does not accept time logging",
                {"action_code_id": str(code.id)},
            )
        return code

    def _get_open_timesheet(self, timesheet_id: uuid.UUID, owner_id: uuid.UUID, day: date) -> Timesheet:
        sheet = self.get_or_404(self.timesheets, timesheet_id, "Timesheet")
        if sheet.user_id != owner_id:
            raise DomainError("Timesheet belongs to another user", {"timesheet_id": str(sheet.id)})
        if sheet.status != TimesheetStatus.DRAFT:
            raise DomainError(
                f"Timesheet is {sheet.status.value} and no longer accepts entries",
                {"status": sheet.status.value},
            )
        if not sheet.covers(day):
            raise DomainError("Entry day falls outside the timesheet period", {"day": str(day)})
        return sheet

    def _refresh_total(self, sheet: Timesheet) -> None:
        self.db.flush()
        sheet.total_minutes = self.repo.total_minutes(sheet.id, self.company_id)
        self.db.flush()
