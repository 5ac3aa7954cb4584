# GoGoTime - Timesheet Entry tests

from datetime import date, datetime

import pytest

from gogotime.errors import DomainError, ForbiddenError, NotFoundError, ValidationError
from gogotime.models import TimesheetStatus, WorkMode
from gogotime.repositories import ActionCodeRepository
from gogotime.services import TimesheetEntryService


def entry_payload(action_code, **overrides):
    payload = {
        "action_code_id": str(action_code.id),
        "country": "FR",
        "started_at": "2025-03-04T09:00:00",
        "ended_at": "2025-03-04T12:30:00",
    }
    payload.update(overrides)
    return payload


# ---- create --------------------------------------------------------------

def test_duration_is_derived_from_times(db, employee, action_code):
    entry = TimesheetEntryService(db, employee).create_entry(entry_payload(action_code))
    db.commit()

    assert entry.duration_min == 210
    assert entry.day == date(2025, 3, 4)
    assert entry.status == TimesheetStatus.DRAFT
    assert entry.work_mode == WorkMode.OFFICE
    assert entry.user_id == employee.id


def test_duration_without_times(db, employee, action_code):
    entry = TimesheetEntryService(db, employee).create_entry({
        "action_code_id": str(action_code.id),
        "country": "de",
        "duration_min": 90,
        "day": "2025-03-05",
        "work_mode": "remote",
    })
    db.commit()

    assert entry.duration_min == 90
    assert entry.started_at is None
    assert entry.country == "DE"
    assert entry.work_mode == WorkMode.REMOTE


@pytest.mark.parametrize("overrides, field", [
    ({"ended_at": "2025-03-04T08:00:00"}, ""),
    ({"ended_at": None}, ""),
    ({"ended_at": "2025-03-05T12:30:00"}, ""),
    ({"country": "FRA"}, "country"),
    ({"work_mode": "moon"}, "work_mode"),
])
def test_invalid_entries_are_rejected(db, employee, action_code, overrides, field):
    with pytest.raises(ValidationError) as exc_info:
        TimesheetEntryService(db, employee).create_entry(entry_payload(action_code, **overrides))
    assert exc_info.value.violations[0]["field"] == field


def test_duration_without_day_is_invalid(db, employee, action_code):
    with pytest.raises(ValidationError):
        TimesheetEntryService(db, employee).create_entry({
            "action_code_id": str(action_code.id),
            "country": "FR",
            "duration_min": 90,
        })


def test_closed_action_code_refuses_time(db, company, employee, action_code):
    action_code.allow_time_logging = False
    db.commit()

    with pytest.raises(DomainError):
        TimesheetEntryService(db, employee).create_entry(entry_payload(action_code))


def test_foreign_action_code_is_not_found(db, employee, other_company):
    foreign = ActionCodeRepository(db).find_by_code("DEV", other_company.id)
    with pytest.raises(NotFoundError):
        TimesheetEntryService(db, employee).create_entry(entry_payload(foreign))


def test_employee_cannot_log_time_for_others(db, employee, manager, action_code):
    with pytest.raises(ForbiddenError):
        TimesheetEntryService(db, employee).create_entry(entry_payload(action_code, user_id=str(manager.id)))


def test_manager_logs_time_for_employee(db, manager, employee, action_code):
    entry = TimesheetEntryService(db, manager).create_entry(entry_payload(action_code, user_id=str(employee.id)))
    db.commit()

    assert entry.user_id == employee.id
    assert entry.created_by_user_id == manager.id


# ---- timesheet attachment ------------------------------------------------

def test_entry_updates_timesheet_total(db, employee, action_code, make_timesheet):
    sheet = make_timesheet(employee)
    service = TimesheetEntryService(db, employee)

    service.create_entry(entry_payload(action_code, timesheet_id=str(sheet.id)))
    service.create_entry(entry_payload(
        action_code,
        timesheet_id=str(sheet.id),
        started_at="2025-03-05T13:00:00",
        ended_at="2025-03-05T14:00:00",
    ))
    db.commit()
    db.refresh(sheet)

    assert sheet.total_minutes == 270


def test_entry_must_fall_inside_timesheet_period(db, employee, action_code, make_timesheet):
    sheet = make_timesheet(employee)
    with pytest.raises(DomainError):
        TimesheetEntryService(db, employee).create_entry(entry_payload(
            action_code,
            timesheet_id=str(sheet.id),
            started_at="2025-03-12T09:00:00",
            ended_at="2025-03-12T10:00:00",
        ))


def test_submitted_timesheet_accepts_no_entries(db, employee, action_code, make_timesheet):
    sheet = make_timesheet(employee, status=TimesheetStatus.SUBMITTED)
    with pytest.raises(DomainError):
        TimesheetEntryService(db, employee).create_entry(entry_payload(action_code, timesheet_id=str(sheet.id)))


def test_entry_cannot_join_someone_elses_timesheet(db, manager, employee, action_code, make_timesheet):
    sheet = make_timesheet(manager)
    with pytest.raises(DomainError):
        TimesheetEntryService(db, employee).create_entry(entry_payload(action_code, timesheet_id=str(sheet.id)))


# ---- update / delete -----------------------------------------------------

def test_update_recomputes_duration_and_total(db, employee, action_code, make_timesheet):
    sheet = make_timesheet(employee)
    service = TimesheetEntryService(db, employee)
    entry = service.create_entry(entry_payload(action_code, timesheet_id=str(sheet.id)))
    db.commit()

    updated = service.update_entry(entry.id, {"ended_at": "2025-03-04T10:00:00", "version": entry.version})
    db.commit()
    db.refresh(sheet)

    assert updated.duration_min == 60
    assert updated.started_at == datetime(2025, 3, 4, 9, 0)
    assert sheet.total_minutes == 60


def test_offset_timestamps_are_stored_as_utc(db, employee, action_code):
    entry = TimesheetEntryService(db, employee).create_entry(entry_payload(
        action_code,
        started_at="2025-03-04T09:00:00",
        ended_at="2025-03-04T14:30:00+02:00",
    ))
    db.commit()

    assert entry.ended_at == datetime(2025, 3, 4, 12, 30)
    assert entry.ended_at.tzinfo is None
    assert entry.duration_min == 210


def test_update_with_utc_suffix(db, employee, action_code):
    service = TimesheetEntryService(db, employee)
    entry = service.create_entry(entry_payload(action_code))
    db.commit()

    updated = service.update_entry(entry.id, {"started_at": "2025-03-04T08:00:00Z"})
    db.commit()

    assert updated.started_at == datetime(2025, 3, 4, 8, 0)
    assert updated.duration_min == 270


def test_bare_duration_clears_times(db, employee, action_code):
    service = TimesheetEntryService(db, employee)
    entry = service.create_entry(entry_payload(action_code))
    db.commit()

    updated = service.update_entry(entry.id, {"duration_min": 45})
    db.commit()

    assert updated.duration_min == 45
    assert updated.started_at is None
    assert updated.ended_at is None


def test_update_cannot_clear_required_fields(db, employee, action_code):
    service = TimesheetEntryService(db, employee)
    entry = service.create_entry(entry_payload(action_code))
    db.commit()

    with pytest.raises(ValidationError):
        service.update_entry(entry.id, {"country": None})


def test_only_draft_entries_can_be_edited(db, employee, action_code):
    service = TimesheetEntryService(db, employee)
    entry = service.create_entry(entry_payload(action_code))
    db.commit()
    service.submit_entry(entry.id)
    db.commit()

    with pytest.raises(DomainError):
        service.update_entry(entry.id, {"note": "too late"})


def test_employee_cannot_edit_others_entries(db, manager, employee, action_code):
    entry = TimesheetEntryService(db, manager).create_entry(entry_payload(action_code))
    db.commit()

    with pytest.raises(ForbiddenError):
        TimesheetEntryService(db, employee).update_entry(entry.id, {"note": "hi"})


def test_delete_draft_entry_updates_total(db, employee, action_code, make_timesheet):
    sheet = make_timesheet(employee)
    service = TimesheetEntryService(db, employee)
    entry = service.create_entry(entry_payload(action_code, timesheet_id=str(sheet.id)))
    db.commit()

    service.delete_entry(entry.id)
    db.commit()
    db.refresh(sheet)

    assert sheet.total_minutes == 0
    with pytest.raises(NotFoundError):
        service.get_entry(entry.id)


def test_rejected_entry_can_be_deleted(db, manager, employee, action_code):
    service = TimesheetEntryService(db, employee)
    entry = service.create_entry(entry_payload(action_code))
    db.commit()
    service.submit_entry(entry.id)
    db.commit()
    TimesheetEntryService(db, manager).reject_entry(entry.id, {"reason": "Duplicate"})
    db.commit()

    deleted = service.delete_entry(entry.id)
    db.commit()
    assert deleted.is_deleted


def test_submitted_entry_cannot_be_deleted(db, employee, action_code):
    service = TimesheetEntryService(db, employee)
    entry = service.create_entry(entry_payload(action_code))
    db.commit()
    service.submit_entry(entry.id)
    db.commit()

    with pytest.raises(DomainError):
        service.delete_entry(entry.id)


# ---- listing -------------------------------------------------------------

def test_list_entries_filters(db, employee, action_code):
    service = TimesheetEntryService(db, employee)
    service.create_entry(entry_payload(action_code))
    service.create_entry(entry_payload(
        action_code,
        started_at="2025-03-06T09:00:00",
        ended_at="2025-03-06T10:00:00",
    ))
    db.commit()

    assert len(service.list_entries()) == 2
    assert len(service.list_entries(date_from=date(2025, 3, 5))) == 1
    assert service.list_entries(status=TimesheetStatus.SUBMITTED) == []


def test_listing_others_entries_needs_permission(db, manager, employee, action_code):
    TimesheetEntryService(db, employee).create_entry(entry_payload(action_code))
    db.commit()

    assert len(TimesheetEntryService(db, manager).list_entries(user_id=employee.id)) == 1
    with pytest.raises(ForbiddenError):
        TimesheetEntryService(db, employee).list_entries(user_id=manager.id)
