# GoGoTime - Permission Keys
# Names checked by the services, plus the catalogue seeded for new companies

# Permissions & roles
CREATE_PERMISSION = "create_permission"
UPDATE_PERMISSION = "update_permission"
DELETE_PERMISSION = "delete_permission"
CREATE_ROLE = "create_role"
UPDATE_ROLE = "update_role"
DELETE_ROLE = "delete_role"
CREATE_ROLE_PERMISSION = "create_role_permission"
DELETE_ROLE_PERMISSION = "delete_role_permission"

# Users
CREATE_USER = "create_user"
UPDATE_USER = "update_user"
DELETE_USER = "delete_user"
RESTORE_USER = "restore_user"
ANONYMIZE_USER = "anonymize_user"

# Leave requests (acting on someone else's)
CREATE_OTHER_LEAVE_REQUEST = "create_other_leave_request"
UPDATE_OTHER_LEAVE_REQUEST = "update_other_leave_request"
DELETE_OTHER_LEAVE_REQUEST = "delete_other_leave_request"
VIEW_OTHER_LEAVE_REQUEST = "view_other_leave_request"

# Timesheets
CREATE_OTHER_TIMESHEET = "create_other_timesheet"
VIEW_OTHER_TIMESHEET = "view_other_timesheet"
SUBMIT_OTHER_TIMESHEET = "submit_other_timesheet"
APPROVE_TIMESHEET = "approve_timesheet"
REJECT_TIMESHEET = "reject_timesheet"
INVOICE_TIMESHEET = "invoice_timesheet"

# Timesheet entries
CREATE_OTHER_TIMESHEET_ENTRY = "create_other_timesheet_entry"
UPDATE_OTHER_TIMESHEET_ENTRY = "update_other_timesheet_entry"
DELETE_OTHER_TIMESHEET_ENTRY = "delete_other_timesheet_entry"

# Lookups & sessions
MANAGE_ACTION_CODES = "manage_action_codes"
REVOKE_OTHER_SESSION = "revoke_other_session"


DEFAULT_PERMISSIONS = {
    CREATE_PERMISSION: "Create permissions",
    UPDATE_PERMISSION: "Rename or describe permissions",
    DELETE_PERMISSION: "Delete permissions",
    CREATE_ROLE: "Create roles",
    UPDATE_ROLE: "Edit roles",
    DELETE_ROLE: "Delete roles",
    CREATE_ROLE_PERMISSION: "Grant a permission to a role",
    DELETE_ROLE_PERMISSION: "Revoke a permission from a role",
    CREATE_USER: "Create users",
    UPDATE_USER: "Edit other users, their role and active flag",
    DELETE_USER: "Deactivate (soft delete) users",
    RESTORE_USER: "Bring back deleted users",
    ANONYMIZE_USER: "Irreversibly anonymize a user",
    CREATE_OTHER_LEAVE_REQUEST: "Request leave on behalf of another user",
    UPDATE_OTHER_LEAVE_REQUEST: "Edit, approve or reject another user's leave",
    DELETE_OTHER_LEAVE_REQUEST: "Delete another user's leave request",
    VIEW_OTHER_LEAVE_REQUEST: "See other users' leave requests",
    CREATE_OTHER_TIMESHEET: "Open a timesheet for another user",
    VIEW_OTHER_TIMESHEET: "See other users' timesheets and entries",
    SUBMIT_OTHER_TIMESHEET: "Submit another user's timesheet or entries",
    APPROVE_TIMESHEET: "Approve submitted timesheets and entries",
    REJECT_TIMESHEET: "Reject submitted timesheets and entries",
    INVOICE_TIMESHEET: "Mark approved timesheets and entries as invoiced",
    CREATE_OTHER_TIMESHEET_ENTRY: "Log time for another user",
    UPDATE_OTHER_TIMESHEET_ENTRY: "Edit another user's time entries",
    DELETE_OTHER_TIMESHEET_ENTRY: "Delete another user's time entries",
    MANAGE_ACTION_CODES: "Maintain action codes and categories",
    REVOKE_OTHER_SESSION: "Sign another user out",
}


OWNER_ROLE = "Owner/CEO"
MANAGER_ROLE = "Manager"
EMPLOYEE_ROLE = "Employee"

DEFAULT_ROLES = {
    OWNER_ROLE: "Full control",
    MANAGER_ROLE: "Manage teams and approvals",
    EMPLOYEE_ROLE: "Standard user",
}

# Employees act on their own records only, which needs no grant
DEFAULT_ROLE_GRANTS = {
    OWNER_ROLE: list(DEFAULT_PERMISSIONS),
    MANAGER_ROLE: [
        CREATE_USER,
        UPDATE_USER,
        CREATE_OTHER_LEAVE_REQUEST,
        UPDATE_OTHER_LEAVE_REQUEST,
        VIEW_OTHER_LEAVE_REQUEST,
        CREATE_OTHER_TIMESHEET,
        VIEW_OTHER_TIMESHEET,
        SUBMIT_OTHER_TIMESHEET,
        APPROVE_TIMESHEET,
        REJECT_TIMESHEET,
        CREATE_OTHER_TIMESHEET_ENTRY,
        UPDATE_OTHER_TIMESHEET_ENTRY,
        REVOKE_OTHER_SESSION,
    ],
    EMPLOYEE_ROLE: [],
}


DEFAULT_ACTION_CODES = [
    ("DEV", "Product Development"),
    ("MEETING", "Client Meetings"),
    ("EMAIL", "Inbox & Admin"),
    ("HOLIDAY", "Holiday"),
    ("SICK", "Sick Leave"),
    ("TRAINING", "Training & Learning"),
]
