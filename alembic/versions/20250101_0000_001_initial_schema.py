"""Initial schema - all tables

Revision ID: 001
Revises:
Create Date: 2025-01-01 00:00:00.000000

This migration creates all initial tables for GoGoTime:
- companies: Tenants
- roles, permissions, role_permissions: Authorization catalogue and grants
- users: Accounts, one role each
- action_codes: What kind of work an entry records
- leave_requests: Time off
- timesheets, timesheet_entries: Logged time and its approval state
- active_sessions: Issued bearer tokens
- timesheet_history: Append-only change trail
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def audit_columns() -> list:
    """Primary key, timestamps, actor ids, version and soft delete."""
    return [
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('created_by_user_id', sa.Uuid(), nullable=True),
        sa.Column('updated_by_user_id', sa.Uuid(), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
    ]


def tenant_columns(table_name: str) -> list:
    return audit_columns() + [
        sa.Column('company_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], name=f'fk_{table_name}_company', ondelete='RESTRICT'),
    ]


def create_tenant_indexes(table_name: str) -> None:
    op.create_index(f'ix_{table_name}_company_id', table_name, ['company_id'])
    op.create_index(f'ix_{table_name}_deleted_at', table_name, ['deleted_at'])


def approval_columns() -> list:
    return [
        sa.Column('status', sa.String(length=16), nullable=False, server_default='DRAFT'),
        sa.Column('submitted_at', sa.DateTime(), nullable=True),
        sa.Column('submitted_by_user_id', sa.Uuid(), nullable=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.Column('approver_id', sa.Uuid(), nullable=True),
        sa.Column('rejected_at', sa.DateTime(), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('invoiced_at', sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    # Companies table
    op.create_table(
        'companies',
        *audit_columns(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_companies_deleted_at', 'companies', ['deleted_at'])

    # Roles table
    op.create_table(
        'roles',
        *tenant_columns('roles'),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('company_id', 'name', name='uq_roles_company_name'),
    )
    create_tenant_indexes('roles')

    # Permissions table
    op.create_table(
        'permissions',
        *tenant_columns('permissions'),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('company_id', 'name', name='uq_permissions_company_name'),
    )
    create_tenant_indexes('permissions')

    # Role permissions table
    op.create_table(
        'role_permissions',
        *tenant_columns('role_permissions'),
        sa.Column('role_id', sa.Uuid(), nullable=False),
        sa.Column('permission_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['role_id'], ['roles.id'], name='fk_role_permissions_role', ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['permission_id'], ['permissions.id'], name='fk_role_permissions_permission', ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('company_id', 'role_id', 'permission_id', name='uq_role_permissions_company_role_permission'),
    )
    create_tenant_indexes('role_permissions')
    op.create_index('ix_role_permissions_role', 'role_permissions', ['company_id', 'role_id'])
    op.create_index('ix_role_permissions_permission_id', 'role_permissions', ['permission_id'])

    # Users table
    op.create_table(
        'users',
        *tenant_columns('users'),
        sa.Column('role_id', sa.Uuid(), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('phone_number', sa.String(length=32), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_anonymized', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['role_id'], ['roles.id'], name='fk_users_role', ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    create_tenant_indexes('users')
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role_id', 'users', ['role_id'])

    # Action codes table
    op.create_table(
        'action_codes',
        *tenant_columns('action_codes'),
        sa.Column('code', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('company_id', 'code', name='uq_action_codes_company_code'),
    )
    create_tenant_indexes('action_codes')

    # Leave requests table
    op.create_table(
        'leave_requests',
        *tenant_columns('leave_requests'),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('leave_type', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='PENDING'),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_leave_requests_user', ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    create_tenant_indexes('leave_requests')
    op.create_index('ix_leave_requests_company_user', 'leave_requests', ['company_id', 'user_id'])
    op.create_index('ix_leave_requests_company_dates', 'leave_requests', ['company_id', 'start_date', 'end_date'])

    # Timesheets table
    op.create_table(
        'timesheets',
        *tenant_columns('timesheets'),
        *approval_columns(),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('period_start', sa.Date(), nullable=False),
        sa.Column('period_end', sa.Date(), nullable=False),
        sa.Column('total_minutes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_timesheets_user', ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('company_id', 'user_id', 'period_start', 'period_end', name='uq_timesheets_company_user_period'),
    )
    create_tenant_indexes('timesheets')
    op.create_index('ix_timesheets_user_id', 'timesheets', ['user_id'])
    op.create_index('ix_timesheets_company_status', 'timesheets', ['company_id', 'status'])

    # Timesheet entries table
    op.create_table(
        'timesheet_entries',
        *tenant_columns('timesheet_entries'),
        *approval_columns(),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('timesheet_id', sa.Uuid(), nullable=True),
        sa.Column('action_code_id', sa.Uuid(), nullable=False),
        sa.Column('work_mode', sa.String(length=8), nullable=False, server_default='office'),
        sa.Column('country', sa.String(length=2), nullable=False),
        sa.Column('started_at', sa.DateTime(), nullable=True),
        sa.Column('ended_at', sa.DateTime(), nullable=True),
        sa.Column('duration_min', sa.Integer(), nullable=False),
        sa.Column('day', sa.Date(), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.CheckConstraint('duration_min BETWEEN 0 AND 1440', name='ck_timesheet_entries_duration'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_timesheet_entries_user', ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['timesheet_id'], ['timesheets.id'], name='fk_timesheet_entries_timesheet', ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['action_code_id'], ['action_codes.id'], name='fk_timesheet_entries_action_code', ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    create_tenant_indexes('timesheet_entries')
    op.create_index('ix_timesheet_entries_action_code_id', 'timesheet_entries', ['action_code_id'])
    op.create_index('ix_timesheet_entries_company_user_day', 'timesheet_entries', ['company_id', 'user_id', 'day'])
    op.create_index('ix_timesheet_entries_company_timesheet', 'timesheet_entries', ['company_id', 'timesheet_id'])

    # Active sessions table
    op.create_table(
        'active_sessions',
        *tenant_columns('active_sessions'),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('token_hash', sa.String(length=64), nullable=False),
        sa.Column('ip', sa.String(length=45), nullable=True),
        sa.Column('user_agent', sa.String(length=500), nullable=True),
        sa.Column('device_id', sa.String(length=100), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('last_seen_at', sa.DateTime(), nullable=True),
        sa.Column('revoked_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_active_sessions_user', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('token_hash', name='uq_active_sessions_token_hash'),
    )
    create_tenant_indexes('active_sessions')
    op.create_index('ix_active_sessions_company_user', 'active_sessions', ['company_id', 'user_id'])

    # History table (append-only, no audit columns)
    op.create_table(
        'timesheet_history',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('company_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=True),
        sa.Column('target_type', sa.String(length=32), nullable=False),
        sa.Column('target_id', sa.Uuid(), nullable=False),
        sa.Column('action', sa.String(length=16), nullable=False),
        sa.Column('actor_user_id', sa.Uuid(), nullable=True),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('diff', sa.Text(), nullable=True),
        sa.Column('metadata', sa.Text(), nullable=True),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.Column('occurred_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], name='fk_timesheet_history_company', ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_timesheet_history_user', ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_timesheet_history_company_id', 'timesheet_history', ['company_id'])
    op.create_index('ix_timesheet_history_user_id', 'timesheet_history', ['user_id'])
    op.create_index('ix_timesheet_history_action', 'timesheet_history', ['action'])
    op.create_index('ix_timesheet_history_occurred_at', 'timesheet_history', ['occurred_at'])
    op.create_index('ix_timesheet_history_target', 'timesheet_history', ['company_id', 'target_type', 'target_id'])


def downgrade() -> None:
    op.drop_table('timesheet_history')
    op.drop_table('active_sessions')
    op.drop_table('timesheet_entries')
    op.drop_table('timesheets')
    op.drop_table('leave_requests')
    op.drop_table('action_codes')
    op.drop_table('users')
    op.drop_table('role_permissions')
    op.drop_table('permissions')
    op.drop_table('roles')
    op.drop_table('companies')
