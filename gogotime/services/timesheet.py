# GoGoTime - Timesheet Service
# Timesheet creation, listing and the approval workflow

import logging
import uuid
from typing import Optional, Sequence

from gogotime.errors import ConflictError, NotFoundError
from gogotime.models import Timesheet, TimesheetStatus, HistoryTargetType
from gogotime.permissions import (
    CREATE_OTHER_TIMESHEET,
    VIEW_OTHER_TIMESHEET,
    SUBMIT_OTHER_TIMESHEET,
    APPROVE_TIMESHEET,
    REJECT_TIMESHEET,
    INVOICE_TIMESHEET,
)
from gogotime.repositories import TimesheetRepository, TimesheetEntryRepository, UserRepository
from gogotime.schemas import TimesheetCreate, RejectRequest
from gogotime.services.base import TenantService
from gogotime.services.workflow import apply_transition, SOURCE_STATE, HISTORY_ACTIONS
from gogotime.validation import validate_dto


logger = logging.getLogger(__name__)


class TimesheetService(TenantService):
    """
    Timesheets of the caller's company.

    Status moves forward only:

        DRAFT -> SUBMITTED -> APPROVED -> INVOICED
                          \\-> REJECTED

    Each transition re-checks the stored status, then carries the
    timesheet's entries that sit in the same source status along with it.

    Usage:
        service = TimesheetService(db, current_user, request.client.host)
        sheet = service.create_timesheet({"period_start": "2025-03-03", "period_end": "2025-03-09"})
        service.submit_timesheet(sheet.id)
        TimesheetService(db, manager).approve_timesheet(sheet.id)
    """

    def __init__(self, db, current_user, ip_address=None):
        super().__init__(db, current_user, ip_address)
        self.repo = TimesheetRepository(db)
        self.entries = TimesheetEntryRepository(db)
        self.users = UserRepository(db)

    # ---- reads ----------------------------------------------------------

    def get_timesheet(self, timesheet_id: uuid.UUID) -> Timesheet:
        sheet = self.get_or_404(self.repo, timesheet_id, "Timesheet")
        self.ensure_can_act_on(sheet.user_id, VIEW_OTHER_TIMESHEET, "You may only view your own timesheets")
        return sheet

    def list_timesheets(
        self,
        user_id: Optional[uuid.UUID] = None,
        status: Optional[TimesheetStatus] = None,
        all_users: bool = False,
    ) -> Sequence[Timesheet]:
        """
        Own timesheets by default. Another user's, or everybody's with
        all_users, needs view_other_timesheet.
        """
        if all_users:
            self.require_permission(VIEW_OTHER_TIMESHEET)
            return self.repo.search(self.company_id, status=status)

        user_id = user_id or self.current_user.id
        if user_id != self.current_user.id:
            self.ensure_can_act_on(user_id, VIEW_OTHER_TIMESHEET, "You may only view your own timesheets")
        return self.repo.search(self.company_id, user_id=user_id, status=status)

    # ---- create ---------------------------------------------------------

    def create_timesheet(self, data) -> Timesheet:
        """
        Open a DRAFT timesheet for a period.

        Raises:
            ValidationError, ForbiddenError
            NotFoundError: target user not in the caller's company
            ConflictError: the user already has a timesheet for that period
        """
        dto = validate_dto(TimesheetCreate, data)
        owner_id = dto.user_id or self.current_user.id

        self.ensure_can_act_on(owner_id, CREATE_OTHER_TIMESHEET, "You may only create your own timesheets")

        if owner_id != self.current_user.id and self.users.find_by_id_in_company(owner_id, self.company_id) is None:
            raise NotFoundError("User", owner_id)

        if self.repo.find_for_period(self.company_id, owner_id, dto.period_start, dto.period_end) is not None:
            raise ConflictError(
                "A timesheet already exists for this period",
                {"period_start": str(dto.period_start), "period_end": str(dto.period_end)},
            )

        sheet = Timesheet(
            company_id=self.company_id,
            user_id=owner_id,
            period_start=dto.period_start,
            period_end=dto.period_end,
            notes=dto.notes,
            status=TimesheetStatus.DRAFT,
            total_minutes=0,
        )
        self.repo.add(sheet, self.current_user.id)
        self.history.log_created(HistoryTargetType.TIMESHEET, sheet)
        return sheet

    # ---- workflow -------------------------------------------------------

    def submit_timesheet(self, timesheet_id: uuid.UUID) -> Timesheet:
        sheet = self.get_or_404(self.repo, timesheet_id, "Timesheet")
        self.ensure_can_act_on(sheet.user_id, SUBMIT_OTHER_TIMESHEET, "You may only submit your own timesheets")
        return self._transition(sheet, TimesheetStatus.SUBMITTED)

    def approve_timesheet(self, timesheet_id: uuid.UUID) -> Timesheet:
        sheet = self.get_or_404(self.repo, timesheet_id, "Timesheet")
        self.require_permission(APPROVE_TIMESHEET)
        return self._transition(sheet, TimesheetStatus.APPROVED)

    def reject_timesheet(self, timesheet_id: uuid.UUID, data) -> Timesheet:
        dto = validate_dto(RejectRequest, data)
        sheet = self.get_or_404(self.repo, timesheet_id, "Timesheet")
        self.require_permission(REJECT_TIMESHEET)
        return self._transition(sheet, TimesheetStatus.REJECTED, dto.reason)

    def invoice_timesheet(self, timesheet_id: uuid.UUID) -> Timesheet:
        sheet = self.get_or_404(self.repo, timesheet_id, "Timesheet")
        self.require_permission(INVOICE_TIMESHEET)
        return self._transition(sheet, TimesheetStatus.INVOICED)

    def _transition(self, sheet: Timesheet, target: TimesheetStatus, reason: Optional[str] = None) -> Timesheet:
        source = SOURCE_STATE[target]
        previous = apply_transition(sheet, target, self.current_user.id, reason)
        self.repo.touch(sheet, self.current_user.id)
        self.history.log_transition(
            HistoryTargetType.TIMESHEET, sheet, HISTORY_ACTIONS[target], reason, previous.value
        )

        cascaded = 0
        for entry in self.entries.find_all_for_timesheet(sheet.id, self.company_id, status=source):
            apply_transition(entry, target, self.current_user.id, reason)
            self.entries.touch(entry, self.current_user.id)
            self.history.log_transition(
                HistoryTargetType.TIMESHEET_ENTRY, entry, HISTORY_ACTIONS[target], reason, source.value
            )
            cascaded += 1

        self.db.flush()
        logger.info(
            "Timesheet %s %s -> %s by %s (%d entries)",
            sheet.id, previous.value, target.value, self.current_user.id, cascaded,
        )
        return self.reload(sheet)
