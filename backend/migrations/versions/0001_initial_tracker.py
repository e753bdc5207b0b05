"""initial tracker tables

Revision ID: 0001_initial_tracker
Revises:
Create Date: 2026-10-18
"""
from __future__ import annotations
from alembic import op
import sqlalchemy as sa

revision = '0001_initial_tracker'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('email', sa.String(length=128), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('1')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'))
    )
    op.create_index('ix_users_email', 'users', ['email'])

    op.create_table('user_roles',
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('role', sa.String(length=16), nullable=False, server_default='user'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'))
    )

    op.create_table('workers',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('daily_income_amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='active'),
        sa.Column('created_by', sa.String(length=64)),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'))
    )
    op.create_index('ix_workers_name', 'workers', ['name'])
    op.create_index('ix_workers_status', 'workers', ['status'])

    op.create_table('income_records',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('worker_id', sa.String(length=36), sa.ForeignKey('workers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('expected_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('paid_amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('is_completed', sa.Boolean(), nullable=False, server_default=sa.text('0')),
        sa.Column('notes', sa.Text()),
        sa.Column('completed_at', sa.DateTime(timezone=True)),
        sa.Column('completed_by', sa.String(length=64)),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'))
    )
    op.create_index('ix_income_records_worker_id', 'income_records', ['worker_id'])
    op.create_index('ix_income_records_date', 'income_records', ['date'])
    # unique constraint handled via batch for sqlite
    with op.batch_alter_table('income_records') as batch_op:
        batch_op.create_unique_constraint('uq_income_worker_date', ['worker_id', 'date'])

    op.create_table('expenses',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('worker_id', sa.String(length=36), sa.ForeignKey('workers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('category', sa.String(length=32), nullable=False, server_default='other'),
        sa.Column('description', sa.Text()),
        sa.Column('expense_type', sa.String(length=16), nullable=False, server_default='one_time'),
        sa.Column('recurrence_pattern', sa.String(length=16)),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('is_paid', sa.Boolean(), nullable=False, server_default=sa.text('0')),
        sa.Column('paid_at', sa.DateTime(timezone=True)),
        sa.Column('paid_by', sa.String(length=64)),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'))
    )
    op.create_index('ix_expenses_worker_id', 'expenses', ['worker_id'])
    op.create_index('ix_expenses_date', 'expenses', ['date'])
    op.create_index('ix_expenses_category', 'expenses', ['category'])
    op.create_index('ix_expenses_is_paid', 'expenses', ['is_paid'])

    # No foreign keys: entries must outlive the records they describe.
    op.create_table('audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('action_type', sa.String(length=64), nullable=False),
        sa.Column('record_type', sa.String(length=16), nullable=False),
        sa.Column('record_id', sa.String(length=36), nullable=False),
        sa.Column('worker_id', sa.String(length=36)),
        sa.Column('performed_by', sa.String(length=64), nullable=False),
        sa.Column('performed_by_role', sa.String(length=16), nullable=False),
        sa.Column('previous_value', sa.JSON(), nullable=True),
        sa.Column('new_value', sa.JSON(), nullable=True),
        sa.Column('reason', sa.Text()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP'))
    )
    op.create_index('ix_audit_logs_action_type', 'audit_logs', ['action_type'])
    op.create_index('ix_audit_logs_record_type', 'audit_logs', ['record_type'])
    op.create_index('ix_audit_logs_record_id', 'audit_logs', ['record_id'])
    op.create_index('ix_audit_logs_worker_id', 'audit_logs', ['worker_id'])
    op.create_index('ix_audit_logs_performed_by', 'audit_logs', ['performed_by'])
    op.create_index('ix_audit_logs_created_at', 'audit_logs', ['created_at'])


def downgrade():
    for tbl in ['audit_logs', 'expenses', 'income_records', 'workers', 'user_roles', 'users']:
        op.drop_table(tbl)
