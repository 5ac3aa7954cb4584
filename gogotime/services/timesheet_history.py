# GoGoTime - Timesheet History Service
# Read access to the history trail under the owner-or-override rule

import uuid
from typing import Optional

from gogotime.errors import NotFoundError
from gogotime.models import HistoryTargetType, TimesheetHistory
from gogotime.permissions import VIEW_OTHER_TIMESHEET
from gogotime.services.base import TenantService
from gogotime.services.history import HistoryQuery


class TimesheetHistoryService(TenantService):
    """
    History reads for the caller's company.

    A user sees the trail of records they own. Records owned by someone
    else, or by nobody (permissions, action codes), need
    view_other_timesheet.
    """

    def __init__(self, db, current_user, ip_address=None):
        super().__init__(db, current_user, ip_address)
        self.query = HistoryQuery(db, self.company_id)

    def get_record_history(self, target_type: HistoryTargetType, target_id: uuid.UUID) -> list[TimesheetHistory]:
        rows = self.query.get_record_history(target_type, target_id)
        if not rows:
            raise NotFoundError(target_type.value, target_id)

        self.ensure_can_act_on(rows[0].user_id, VIEW_OTHER_TIMESHEET, "You may only view the history of your own records")
        return rows

    def get_my_changes(self, limit: int = 100, offset: int = 0) -> list[TimesheetHistory]:
        return self.query.get_changes_by_user(self.current_user.id, limit=limit, offset=offset)

    def get_recent_changes(
        self,
        hours: int = 24,
        target_type: Optional[HistoryTargetType] = None,
        limit: int = 100,
    ) -> list[TimesheetHistory]:
        """Company-wide feed; needs view_other_timesheet."""
        self.require_permission(VIEW_OTHER_TIMESHEET)
        return self.query.get_recent_changes(hours=hours, target_type=target_type, limit=limit)
