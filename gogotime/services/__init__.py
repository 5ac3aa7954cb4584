# GoGoTime - Services
# Business logic layer

from .authorization import RolePermissionService
from .history import HistoryService, HistoryQuery
from .active_session import ActiveSessionService
from .auth import AuthService, hash_password, verify_password, hash_token
from .permission import PermissionService
from .role import RoleService
from .user import UserService
from .leave_request import LeaveRequestService
from .timesheet import TimesheetService
from .timesheet_entry import TimesheetEntryService
from .action_code import ActionCodeService, ActionCodeCategoryService
from .anonymization import AnonymizationService
from .timesheet_history import TimesheetHistoryService

__all__ = [
    "RolePermissionService",
    "HistoryService",
    "HistoryQuery",
    "ActiveSessionService",
    "AuthService",
    "hash_password",
    "verify_password",
    "hash_token",
    "PermissionService",
    "RoleService",
    "UserService",
    "LeaveRequestService",
    "TimesheetService",
    "TimesheetEntryService",
    "ActionCodeService",
    "ActionCodeCategoryService",
    "AnonymizationService",
    "TimesheetHistoryService",
]
