"""create ledger tables

Revision ID: 3f1c9a7d2b64
Revises:
Create Date: 2026-10-18 09:00:00.000000+00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f1c9a7d2b64'
down_revision = None
branch_labels = None
depends_on = None

balance_change = sa.Enum('INC', 'DEC', 'NONE', name='balance_change')


def _balance(name: str) -> sa.Column:
    return sa.Column(name, sa.Numeric(precision=18, scale=6), nullable=False, server_default='0')


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    ]


def upgrade() -> None:
    # Create asset_type table
    op.create_table(
        'asset_type',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_asset_type_id'), 'asset_type', ['id'], unique=False)

    # Create action_type table
    op.create_table(
        'action_type',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('available_balance_change', balance_change, nullable=False, server_default='NONE'),
        sa.Column('frozen_balance_change', balance_change, nullable=False, server_default='NONE'),
        sa.Column('total_income_change', balance_change, nullable=False, server_default='NONE'),
        sa.Column('total_expense_change', balance_change, nullable=False, server_default='NONE'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_action_type_id'), 'action_type', ['id'], unique=False)

    # Create account table
    op.create_table(
        'account',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('asset_type_id', sa.Integer(), nullable=False),
        _balance('available_balance'),
        _balance('frozen_balance'),
        _balance('total_income'),
        _balance('total_expense'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['asset_type_id'], ['asset_type.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'asset_type_id', name='uq_account_user_asset_type')
    )
    op.create_index(op.f('ix_account_id'), 'account', ['id'], unique=False)
    op.create_index(op.f('ix_account_user_id'), 'account', ['user_id'], unique=False)
    op.create_index(op.f('ix_account_asset_type_id'), 'account', ['asset_type_id'], unique=False)

    # Create account_log table (append-only audit trail)
    op.create_table(
        'account_log',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('account_id', sa.Integer(), nullable=False),
        sa.Column('action_type_id', sa.Integer(), nullable=False),
        _balance('amount_available_balance'),
        _balance('amount_frozen_balance'),
        _balance('amount_total_income'),
        _balance('amount_total_expense'),
        _balance('available_balance_after'),
        _balance('frozen_balance_after'),
        _balance('total_income_after'),
        _balance('total_expense_after'),
        sa.Column('order_number', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('description', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['account_id'], ['account.id']),
        sa.ForeignKeyConstraint(['action_type_id'], ['action_type.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_account_log_id'), 'account_log', ['id'], unique=False)
    op.create_index(op.f('ix_account_log_account_id'), 'account_log', ['account_id'], unique=False)
    op.create_index(op.f('ix_account_log_order_number'), 'account_log', ['order_number'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_account_log_order_number'), table_name='account_log')
    op.drop_index(op.f('ix_account_log_account_id'), table_name='account_log')
    op.drop_index(op.f('ix_account_log_id'), table_name='account_log')
    op.drop_table('account_log')

    op.drop_index(op.f('ix_account_asset_type_id'), table_name='account')
    op.drop_index(op.f('ix_account_user_id'), table_name='account')
    op.drop_index(op.f('ix_account_id'), table_name='account')
    op.drop_table('account')

    op.drop_index(op.f('ix_action_type_id'), table_name='action_type')
    op.drop_table('action_type')

    op.drop_index(op.f('ix_asset_type_id'), table_name='asset_type')
    op.drop_table('asset_type')

    balance_change.drop(op.get_bind(), checkfirst=True)
