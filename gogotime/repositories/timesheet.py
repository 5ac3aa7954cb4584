# GoGoTime - Timesheet, Entry and Leave Request Repositories

import uuid
from datetime import date
from typing import Optional, Sequence

from sqlalchemy import select, func

from gogotime.models import Timesheet, TimesheetEntry, TimesheetStatus, LeaveRequest
from gogotime.repositories.base import ScopedRepository


class TimesheetRepository(ScopedRepository[Timesheet]):

    model = Timesheet

    def find_for_period(
        self,
        company_id: uuid.UUID,
        user_id: uuid.UUID,
        period_start: date,
        period_end: date,
    ) -> Optional[Timesheet]:
        return self.find_one(
            company_id,
            Timesheet.user_id == user_id,
            Timesheet.period_start == period_start,
            Timesheet.period_end == period_end,
        )

    def search(
        self,
        company_id: uuid.UUID,
        user_id: Optional[uuid.UUID] = None,
        status: Optional[TimesheetStatus] = None,
    ) -> Sequence[Timesheet]:
        criteria = []
        if user_id is not None:
            criteria.append(Timesheet.user_id == user_id)
        if status is not None:
            criteria.append(Timesheet.status == status)
        return self.find_all_in_company(company_id, *criteria, order_by=Timesheet.period_start.desc())


class TimesheetEntryRepository(ScopedRepository[TimesheetEntry]):

    model = TimesheetEntry

    def find_all_for_timesheet(
        self,
        timesheet_id: uuid.UUID,
        company_id: uuid.UUID,
        status: Optional[TimesheetStatus] = None,
    ) -> Sequence[TimesheetEntry]:
        criteria = [TimesheetEntry.timesheet_id == timesheet_id]
        if status is not None:
            criteria.append(TimesheetEntry.status == status)
        return self.find_all_in_company(company_id, *criteria, order_by=TimesheetEntry.day)

    def search(
        self,
        company_id: uuid.UUID,
        user_id: Optional[uuid.UUID] = None,
        timesheet_id: Optional[uuid.UUID] = None,
        status: Optional[TimesheetStatus] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Sequence[TimesheetEntry]:
        criteria = []
        if user_id is not None:
            criteria.append(TimesheetEntry.user_id == user_id)
        if timesheet_id is not None:
            criteria.append(TimesheetEntry.timesheet_id == timesheet_id)
        if status is not None:
            criteria.append(TimesheetEntry.status == status)
        if date_from is not None:
            criteria.append(TimesheetEntry.day >= date_from)
        if date_to is not None:
            criteria.append(TimesheetEntry.day <= date_to)
        return self.find_all_in_company(company_id, *criteria, order_by=TimesheetEntry.day)

    def total_minutes(self, timesheet_id: uuid.UUID, company_id: uuid.UUID) -> int:
        """Sum of duration_min over the live entries of a timesheet."""
        return self.db.execute(
            select(func.coalesce(func.sum(TimesheetEntry.duration_min), 0))
            .where(TimesheetEntry.company_id == company_id)
            .where(TimesheetEntry.timesheet_id == timesheet_id)
            .where(TimesheetEntry.deleted_at.is_(None))
        ).scalar_one()


class LeaveRequestRepository(ScopedRepository[LeaveRequest]):

    model = LeaveRequest

    def find_by_user(self, user_id: uuid.UUID, company_id: uuid.UUID) -> Sequence[LeaveRequest]:
        return self.find_all_in_company(
            company_id,
            LeaveRequest.user_id == user_id,
            order_by=LeaveRequest.start_date.desc(),
        )
