"""Action code categories

Revision ID: 003
Revises: 002
Create Date: 2025-01-01 00:02:00.000000

Adds:
- action_code_categories: per-company grouping, names unique per company
- action_codes.category_id: optional link, cleared when the category goes
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '003'
down_revision: Union[str, None] = '002'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'action_code_categories',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('company_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('created_by_user_id', sa.Uuid(), nullable=True),
        sa.Column('updated_by_user_id', sa.Uuid(), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], name='fk_action_code_categories_company', ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('company_id', 'name', name='uq_action_code_categories_company_name'),
    )
    op.create_index('ix_action_code_categories_company_id', 'action_code_categories', ['company_id'])
    op.create_index('ix_action_code_categories_deleted_at', 'action_code_categories', ['deleted_at'])

    with op.batch_alter_table('action_codes') as batch_op:
        batch_op.add_column(sa.Column('category_id', sa.Uuid(), nullable=True))
        batch_op.create_foreign_key(
            'fk_action_codes_category',
            'action_code_categories',
            ['category_id'], ['id'],
            ondelete='SET NULL',
        )
        batch_op.create_index('ix_action_codes_category_id', ['category_id'])


def downgrade() -> None:
    with op.batch_alter_table('action_codes') as batch_op:
        batch_op.drop_index('ix_action_codes_category_id')
        batch_op.drop_constraint('fk_action_codes_category', type_='foreignkey')
        batch_op.drop_column('category_id')

    op.drop_table('action_code_categories')
