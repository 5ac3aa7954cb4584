# GoGoTime - SQLAlchemy Models
# UUID keys, naive UTC timestamps, soft delete and company scoping on every tenant table

from .base import (
    Base,
    EntityBase,
    TenantEntity,
    TimestampMixin,
    AuditMixin,
    SoftDeleteMixin,
    utcnow,
)
from .company import Company
from .user import User
from .role import Role, Permission, RolePermission
from .leave_request import LeaveRequest, LeaveRequestStatus, LeaveType
from .action_code import ActionCode, ActionCodeCategory
from .timesheet import Timesheet, TimesheetEntry, TimesheetStatus, WorkMode
from .active_session import ActiveSession
from .timesheet_history import (
    TimesheetHistory,
    HistoryTargetType,
    HistoryAction,
    create_history_entry,
)

__all__ = [
    "Base",
    "EntityBase",
    "TenantEntity",
    "TimestampMixin",
    "AuditMixin",
    "SoftDeleteMixin",
    "utcnow",
    "Company",
    "User",
    "Role",
    "Permission",
    "RolePermission",
    "LeaveRequest",
    "LeaveRequestStatus",
    "LeaveType",
    "ActionCode",
    "ActionCodeCategory",
    "Timesheet",
    "TimesheetEntry",
    "TimesheetStatus",
    "WorkMode",
    "ActiveSession",
    "TimesheetHistory",
    "HistoryTargetType",
    "HistoryAction",
    "create_history_entry",
]
