# GoGoTime - Pydantic Schemas
# Request payloads (validated by services) and response shapes

from .common import ORMModel, EntityResponse, VersionedUpdate
from .permission import (
    PermissionCreate,
    PermissionUpdate,
    PermissionResponse,
    RoleCreate,
    RoleUpdate,
    RoleResponse,
    RoleWithPermissionsResponse,
    RolePermissionCreate,
    RolePermissionResponse,
)
from .user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    LoginRequest,
    ChangePasswordRequest,
    TokenResponse,
    MeResponse,
)
from .leave_request import LeaveRequestCreate, LeaveRequestUpdate, LeaveRequestResponse
from .timesheet import (
    RejectRequest,
    TimesheetCreate,
    TimesheetResponse,
    TimesheetEntryCreate,
    TimesheetEntryUpdate,
    TimesheetEntryResponse,
)
from .action_code import (
    ActionCodeCreate,
    ActionCodeUpdate,
    ActionCodeResponse,
    ActionCodeCategoryCreate,
    ActionCodeCategoryUpdate,
    ActionCodeCategoryResponse,
)
from .session import ActiveSessionResponse, HistoryResponse

__all__ = [
    "ORMModel",
    "EntityResponse",
    "VersionedUpdate",
    "PermissionCreate",
    "PermissionUpdate",
    "PermissionResponse",
    "RoleCreate",
    "RoleUpdate",
    "RoleResponse",
    "RoleWithPermissionsResponse",
    "RolePermissionCreate",
    "RolePermissionResponse",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "LoginRequest",
    "ChangePasswordRequest",
    "TokenResponse",
    "MeResponse",
    "LeaveRequestCreate",
    "LeaveRequestUpdate",
    "LeaveRequestResponse",
    "RejectRequest",
    "TimesheetCreate",
    "TimesheetResponse",
    "TimesheetEntryCreate",
    "TimesheetEntryUpdate",
    "TimesheetEntryResponse",
    "ActionCodeCreate",
    "ActionCodeUpdate",
    "ActionCodeResponse",
    "ActionCodeCategoryCreate",
    "ActionCodeCategoryUpdate",
    "ActionCodeCategoryResponse",
    "ActiveSessionResponse",
    "HistoryResponse",
]
