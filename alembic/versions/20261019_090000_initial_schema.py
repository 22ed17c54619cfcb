"""initial schema: packages, waiting list, transactions

Revision ID: 20261019_090000
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_090000'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(with_updated: bool = True) -> list:
    columns = [sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False)]
    if with_updated:
        columns.append(
            sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False)
        )
    return columns


def _tenant_fk() -> sa.Column:
    return sa.Column(
        'tenant_id',
        sa.BigInteger(),
        sa.ForeignKey('tenants.id', ondelete='CASCADE'),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        'tenants',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('timezone', sa.String(length=64), nullable=False),
        *_timestamps(with_updated=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'studios',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        _tenant_fk(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(with_updated=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_studios_tenant_id', 'studios', ['tenant_id'])

    op.create_table(
        'rooms',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        _tenant_fk(),
        sa.Column('studio_id', sa.BigInteger(), sa.ForeignKey('studios.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_rooms_tenant_id', 'rooms', ['tenant_id'])
    op.create_index('ix_rooms_studio_id', 'rooms', ['studio_id'])

    op.create_table(
        'clients',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        _tenant_fk(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('gender', sa.String(length=20), nullable=True,
                  comment='male, female, other, prefer_not_to_say'),
        sa.Column('telegram_id', sa.BigInteger(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_clients_tenant_id', 'clients', ['tenant_id'])
    op.create_index('ix_clients_name', 'clients', ['name'])
    op.create_index('ix_clients_telegram_id', 'clients', ['telegram_id'])

    op.create_table(
        'coaches',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        _tenant_fk(),
        sa.Column('studio_id', sa.BigInteger(), sa.ForeignKey('studios.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('gender', sa.String(length=20), nullable=True),
        sa.Column('preferred_client_gender', sa.String(length=10), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(with_updated=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_coaches_tenant_id', 'coaches', ['tenant_id'])
    op.create_index('ix_coaches_studio_id', 'coaches', ['studio_id'])

    op.create_table(
        'packages',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        _tenant_fk(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('total_sessions', sa.Integer(), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False, comment='Price in currency units'),
        sa.Column('validity_days', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_packages_tenant_id', 'packages', ['tenant_id'])

    op.create_table(
        'client_packages',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        _tenant_fk(),
        sa.Column('client_id', sa.BigInteger(), sa.ForeignKey('clients.id', ondelete='CASCADE'), nullable=False),
        sa.Column('package_id', sa.BigInteger(), sa.ForeignKey('packages.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('sessions_used', sa.Integer(), nullable=False),
        sa.Column('sessions_remaining', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('purchase_date', sa.Date(), nullable=False),
        sa.Column('expiry_date', sa.Date(), nullable=False),
        sa.Column('payment_method', sa.String(length=50), nullable=True),
        sa.Column('payment_notes', sa.Text(), nullable=True),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            'renewed_from_id',
            sa.BigInteger(),
            sa.ForeignKey('client_packages.id', ondelete='SET NULL'),
            nullable=True,
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_client_packages_tenant_id', 'client_packages', ['tenant_id'])
    op.create_index('ix_client_packages_client_id', 'client_packages', ['client_id'])
    op.create_index('ix_client_packages_package_id', 'client_packages', ['package_id'])
    op.create_index('ix_client_packages_status', 'client_packages', ['status'])
    op.create_index('ix_client_packages_expiry_date', 'client_packages', ['expiry_date'])

    op.create_table(
        'transactions',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        _tenant_fk(),
        sa.Column('studio_id', sa.BigInteger(), sa.ForeignKey('studios.id', ondelete='SET NULL'), nullable=True),
        sa.Column('client_id', sa.BigInteger(), sa.ForeignKey('clients.id', ondelete='SET NULL'), nullable=True),
        sa.Column('type', sa.String(length=20), nullable=False, comment='Type: income, expense, refund'),
        sa.Column('category', sa.String(length=30), nullable=False,
                  comment='Category: package_sale, session_fee, refund, other'),
        sa.Column('status', sa.String(length=20), nullable=False, comment='Status: pending, paid'),
        sa.Column('amount', sa.Integer(), nullable=False, comment='Amount in currency units'),
        sa.Column('payment_method', sa.String(length=50), nullable=True),
        sa.Column('reference_type', sa.String(length=50), nullable=True),
        sa.Column('reference_id', sa.BigInteger(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_by', sa.BigInteger(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_transactions_tenant_id', 'transactions', ['tenant_id'])
    op.create_index('ix_transactions_studio_id', 'transactions', ['studio_id'])
    op.create_index('ix_transactions_client_id', 'transactions', ['client_id'])
    op.create_index('ix_transactions_status', 'transactions', ['status'])
    op.create_index('ix_transactions_created_at', 'transactions', ['created_at'])

    op.create_table(
        'sessions',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        _tenant_fk(),
        sa.Column('studio_id', sa.BigInteger(), sa.ForeignKey('studios.id', ondelete='CASCADE'), nullable=False),
        sa.Column('client_id', sa.BigInteger(), sa.ForeignKey('clients.id', ondelete='CASCADE'), nullable=False),
        sa.Column('coach_id', sa.BigInteger(), sa.ForeignKey('coaches.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('room_id', sa.BigInteger(), sa.ForeignKey('rooms.id', ondelete='SET NULL'), nullable=True),
        sa.Column(
            'client_package_id',
            sa.BigInteger(),
            sa.ForeignKey('client_packages.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(with_updated=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_sessions_tenant_id', 'sessions', ['tenant_id'])
    op.create_index('ix_sessions_studio_id', 'sessions', ['studio_id'])
    op.create_index('ix_sessions_client_id', 'sessions', ['client_id'])
    op.create_index('ix_sessions_coach_id', 'sessions', ['coach_id'])
    op.create_index('ix_sessions_start_time', 'sessions', ['start_time'])
    op.create_index('ix_sessions_status', 'sessions', ['status'])

    op.create_table(
        'waiting_list',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        _tenant_fk(),
        sa.Column('client_id', sa.BigInteger(), sa.ForeignKey('clients.id', ondelete='CASCADE'), nullable=False),
        sa.Column('studio_id', sa.BigInteger(), sa.ForeignKey('studios.id', ondelete='CASCADE'), nullable=False),
        sa.Column('coach_id', sa.BigInteger(), sa.ForeignKey('coaches.id', ondelete='SET NULL'), nullable=True),
        sa.Column('session_id', sa.BigInteger(), sa.ForeignKey('sessions.id', ondelete='SET NULL'), nullable=True),
        sa.Column('preferred_date', sa.Date(), nullable=True),
        sa.Column('preferred_time_slot', sa.String(length=50), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('requires_approval', sa.Boolean(), nullable=False),
        sa.Column('priority', sa.BigInteger(), nullable=False),
        sa.Column('approved_by', sa.BigInteger(), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notified_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notification_method', sa.String(length=20), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_waiting_list_tenant_id', 'waiting_list', ['tenant_id'])
    op.create_index('ix_waiting_list_client_id', 'waiting_list', ['client_id'])
    op.create_index('ix_waiting_list_studio_id', 'waiting_list', ['studio_id'])
    op.create_index('ix_waiting_list_status', 'waiting_list', ['status'])
    op.create_index('ix_waiting_list_priority', 'waiting_list', ['priority'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        _tenant_fk(),
        sa.Column('action', sa.String(length=100), nullable=False),
        sa.Column('entity_type', sa.String(length=50), nullable=False),
        sa.Column('entity_id', sa.BigInteger(), nullable=True),
        sa.Column('performed_by', sa.BigInteger(), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        *_timestamps(with_updated=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_audit_logs_tenant_id', 'audit_logs', ['tenant_id'])
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
    op.create_index('ix_audit_logs_created_at', 'audit_logs', ['created_at'])


def downgrade() -> None:
    for table in (
        'audit_logs',
        'waiting_list',
        'sessions',
        'transactions',
        'client_packages',
        'packages',
        'coaches',
        'clients',
        'rooms',
        'studios',
        'tenants',
    ):
        op.drop_table(table)
