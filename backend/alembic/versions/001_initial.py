"""Initial migration - create accounts and activities

Revision ID: 001_initial
Revises:
Create Date: 2024-01-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create accounts table
    op.create_table(
        'accounts',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('telegram_id', sa.String(32), nullable=False),
        sa.Column('username', sa.String(100), nullable=True),
        sa.Column('display_name', sa.String(100), nullable=True),
        sa.Column('pledge_meters', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('access_token', sa.Text(), nullable=True),
        sa.Column('refresh_token', sa.Text(), nullable=True),
        sa.Column('concept2_user_id', sa.String(32), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_accounts_telegram_id', 'accounts', ['telegram_id'], unique=True)
    op.create_index('ix_accounts_concept2_user_id', 'accounts', ['concept2_user_id'], unique=True)

    # Create activities table
    op.create_table(
        'activities',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('account_id', sa.Integer(), sa.ForeignKey('accounts.id'), nullable=False),
        sa.Column('concept2_result_id', sa.String(32), nullable=False),
        sa.Column('meters', sa.Integer(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('activity_type', sa.String(32), nullable=True),
        sa.Column('verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('synced_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_activities_account_id', 'activities', ['account_id'])
    op.create_index('ix_activities_concept2_result_id', 'activities', ['concept2_result_id'], unique=True)
    op.create_index('ix_activities_date', 'activities', ['date'])


def downgrade() -> None:
    op.drop_index('ix_activities_date', table_name='activities')
    op.drop_index('ix_activities_concept2_result_id', table_name='activities')
    op.drop_index('ix_activities_account_id', table_name='activities')
    op.drop_table('activities')
    op.drop_index('ix_accounts_concept2_user_id', table_name='accounts')
    op.drop_index('ix_accounts_telegram_id', table_name='accounts')
    op.drop_table('accounts')
