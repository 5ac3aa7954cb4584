# GoGoTime - Repositories
# Company-scoped data access; writes flush, routes commit

from .base import ScopedRepository
from .permission import PermissionRepository, RoleRepository, RolePermissionRepository
from .user import UserRepository
from .timesheet import TimesheetRepository, TimesheetEntryRepository, LeaveRequestRepository
from .action_code import ActionCodeRepository, ActionCodeCategoryRepository
from .session import ActiveSessionRepository

__all__ = [
    "ScopedRepository",
    "PermissionRepository",
    "RoleRepository",
    "RolePermissionRepository",
    "UserRepository",
    "TimesheetRepository",
    "TimesheetEntryRepository",
    "LeaveRequestRepository",
    "ActionCodeRepository",
    "ActionCodeCategoryRepository",
    "ActiveSessionRepository",
]
