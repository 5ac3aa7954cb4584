"""Add allow_time_logging to action codes

Revision ID: 002
Revises: 001
Create Date: 2025-01-01 00:01:00.000000

Codes with time logging switched off stay listed for reporting but
refuse new timesheet entries. Existing codes keep accepting time.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table('action_codes') as batch_op:
        batch_op.add_column(
            sa.Column('allow_time_logging', sa.Boolean(), nullable=False, server_default=sa.true())
        )


def downgrade() -> None:
    with op.batch_alter_table('action_codes') as batch_op:
        batch_op.drop_column('allow_time_logging')
