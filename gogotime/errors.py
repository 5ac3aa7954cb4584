# GoGoTime - Error Types
# Raised by services, rendered to JSON by the handlers in gogotime.main

from typing import Any, Dict, List, Optional


class GoGoTimeError(Exception):
    """
    Base class for every error a service may raise.

    Each subclass fixes an error kind and an HTTP status; the exception
    handlers turn any instance into:

        {"error": kind, "message": message, "details": {...}}
    """

    kind = "error"
    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.kind,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(GoGoTimeError):
    """
    Input failed schema validation.

    violations is a list of {"field", "message", "type"} dicts, one per
    failed constraint.
    """

    kind = "validation_error"
    status_code = 422

    def __init__(self, violations: List[Dict[str, str]], message: Optional[str] = None):
        if message is None:
            message = "; ".join(
                f"{v['field']}: {v['message']}" if v.get("field") else v["message"]
                for v in violations
            ) or "Validation failed"
        super().__init__(message, {"violations": violations})
        self.violations = violations

    @classmethod
    def single(cls, field: str, message: str, type_: str = "value_error") -> "ValidationError":
        return cls([{"field": field, "message": message, "type": type_}])


class AuthenticationError(GoGoTimeError):
    """Missing, invalid or revoked credentials."""

    kind = "unauthenticated"
    status_code = 401


class ForbiddenError(GoGoTimeError):
    """The principal is neither the owner nor holds the needed permission."""

    kind = "forbidden"
    status_code = 403


class NotFoundError(GoGoTimeError):
    """Absent, soft-deleted, or owned by another company."""

    kind = "not_found"
    status_code = 404

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found"
        details: Dict[str, Any] = {"resource": resource}
        if resource_id is not None:
            details["id"] = str(resource_id)
        super().__init__(message, details)


class ConflictError(GoGoTimeError):
    """Uniqueness violation or stale version."""

    kind = "conflict"
    status_code = 409


class DomainError(GoGoTimeError):
    """A business rule refused the operation."""

    kind = "domain_error"
    status_code = 409


class InvalidStateTransitionError(DomainError):
    """Workflow step not allowed from the record's current status."""

    kind = "invalid_state_transition"

    def __init__(self, resource: str, current: str, target: str):
        super().__init__(
            f"Cannot move {resource} from {current} to {target}",
            {"resource": resource, "current": current, "target": target},
        )
        self.current = current
        self.target = target
