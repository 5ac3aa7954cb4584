# GoGoTime - Validation and error type tests

import pytest

from gogotime.errors import (
    ConflictError,
    DomainError,
    InvalidStateTransitionError,
    NotFoundError,
    ValidationError,
)
from gogotime.schemas import LeaveRequestCreate, TimesheetEntryUpdate
from gogotime.validation import format_violations, validate_dto


def test_validate_dto_returns_model():
    dto = validate_dto(LeaveRequestCreate, {"start_date": "2025-03-03", "end_date": "2025-03-03", "leave_type": "SICK"})
    assert dto.user_id is None
    assert dto.leave_type.value == "SICK"


def test_validate_dto_collects_every_violation():
    with pytest.raises(ValidationError) as exc_info:
        validate_dto(LeaveRequestCreate, {"start_date": "not-a-date", "leave_type": "SICK"})

    fields = {v["field"] for v in exc_info.value.violations}
    assert fields == {"start_date", "end_date"}
    assert exc_info.value.to_dict()["error"] == "validation_error"
    assert exc_info.value.status_code == 422


def test_validate_dto_revalidates_models():
    dto = LeaveRequestCreate(start_date="2025-03-03", end_date="2025-03-04", leave_type="PTO")
    again = validate_dto(LeaveRequestCreate, dto)

    assert again is not dto
    assert again.model_dump() == dto.model_dump()


def test_update_payloads_reject_unknown_fields():
    with pytest.raises(ValidationError) as exc_info:
        validate_dto(TimesheetEntryUpdate, {"status": "APPROVED"})
    assert exc_info.value.violations[0]["field"] == "status"


def test_format_violations_drops_body_prefix():
    violations = format_violations([
        {"loc": ("body", "items", 0, "name"), "msg": "Field required", "type": "missing"},
        {"loc": (), "msg": "Value error, bad", "type": "value_error"},
    ])
    assert violations == [
        {"field": "items.0.name", "message": "Field required", "type": "missing"},
        {"field": "", "message": "Value error, bad", "type": "value_error"},
    ]


def test_single_violation_message():
    error = ValidationError.single("reason", "A rejection reason is required")
    assert error.message == "reason: A rejection reason is required"
    assert error.details == {
        "violations": [{"field": "reason", "message": "A rejection reason is required", "type": "value_error"}]
    }


def test_error_payloads():
    assert NotFoundError("Timesheet", "abc").to_dict() == {
        "error": "not_found",
        "message": "Timesheet not found",
        "details": {"resource": "Timesheet", "id": "abc"},
    }
    assert ConflictError("taken").status_code == 409
    assert DomainError("closed").to_dict()["error"] == "domain_error"

    transition = InvalidStateTransitionError("Timesheet", "DRAFT", "APPROVED")
    assert transition.status_code == 409
    assert transition.to_dict()["details"] == {"resource": "Timesheet", "current": "DRAFT", "target": "APPROVED"}
