"""initial_roster_schema

Revision ID: r1a2b3c4d5e6
Revises:
Create Date: 2026-10-19 09:00:00.000000

매장, 노동 정책, 근무자, 휴가, 주간 스케줄, 슬롯, 배정, 검토 이력, 알림 테이블 생성.
Create stores, labor_policies, workers, time_off_requests, schedules,
shift_slots, assignments, schedule_reviews, and notifications tables.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID


# revision identifiers, used by Alembic.
revision: str = 'r1a2b3c4d5e6'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # stores — 매장 (Store / location)
    op.create_table(
        'stores',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('business_hours', sa.String(50), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # labor_policies — 매장별 노동 정책, 매장당 1행 (One row per store)
    op.create_table(
        'labor_policies',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('store_id', UUID(as_uuid=True), sa.ForeignKey('stores.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('ft_max_daily_hours', sa.Float(), server_default='12', nullable=False),
        sa.Column('pt_max_daily_hours', sa.Float(), server_default='10', nullable=False),
        sa.Column('ft_max_consecutive_days', sa.Integer(), server_default='5', nullable=False),
        sa.Column('pt_max_consecutive_days', sa.Integer(), server_default='6', nullable=False),
        sa.Column('regular_hours_threshold', sa.Float(), server_default='8', nullable=False),
        sa.Column('min_break_minutes', sa.Integer(), server_default='30', nullable=False),
        sa.Column('standard_break_minutes', sa.Integer(), server_default='120', nullable=False),
        sa.Column('weekly_day_factor', sa.Integer(), server_default='6', nullable=False),
        sa.Column('fairness_spread_threshold', sa.Float(), server_default='0.3', nullable=False),
        sa.Column('min_staffing', JSONB(), server_default=sa.text("'{}'::jsonb"), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # workers — 매장 근무자 명단 (Store roster)
    op.create_table(
        'workers',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('store_id', UUID(as_uuid=True), sa.ForeignKey('stores.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('emp_no', sa.String(50), nullable=True, unique=True),
        sa.Column('category', sa.String(20), nullable=False),
        sa.Column('primary_role', sa.String(30), nullable=False),
        sa.Column('skills', JSONB(), server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column('pt_shift_type', sa.String(40), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_workers_store', 'workers', ['store_id'])

    # time_off_requests — 휴가 신청 (approved만 배정에서 제외)
    op.create_table(
        'time_off_requests',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('store_id', UUID(as_uuid=True), sa.ForeignKey('stores.id', ondelete='CASCADE'), nullable=False),
        sa.Column('worker_id', UUID(as_uuid=True), sa.ForeignKey('workers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('off_date', sa.Date(), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), server_default='pending', nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_time_off_store_date', 'time_off_requests', ['store_id', 'off_date'])

    # schedules — 주간 스케줄 (One per store-week, Monday start)
    op.create_table(
        'schedules',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('store_id', UUID(as_uuid=True), sa.ForeignKey('stores.id', ondelete='CASCADE'), nullable=False),
        sa.Column('week_start', sa.Date(), nullable=False),
        sa.Column('status', sa.String(20), server_default='draft', nullable=False),
        sa.Column('sla_deadline_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(100), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('store_id', 'week_start', name='uq_schedule_store_week'),
    )
    # SLA 스윕 조회용 — Supports the overdue lookup of the SLA sweep
    op.create_index('ix_schedules_status_deadline', 'schedules', ['status', 'sla_deadline_at'])

    # shift_slots — 날짜 x 오전/오후 슬롯 (14 per schedule)
    op.create_table(
        'shift_slots',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('schedule_id', UUID(as_uuid=True), sa.ForeignKey('schedules.id', ondelete='CASCADE'), nullable=False),
        sa.Column('store_id', UUID(as_uuid=True), sa.ForeignKey('stores.id', ondelete='CASCADE'), nullable=False),
        sa.Column('work_date', sa.Date(), nullable=False),
        sa.Column('period', sa.String(2), nullable=False),
        sa.Column('min_staffing', JSONB(), server_default=sa.text("'{}'::jsonb"), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('schedule_id', 'work_date', 'period', name='uq_slot_schedule_date_period'),
    )
    op.create_index('ix_shift_slots_store_date', 'shift_slots', ['store_id', 'work_date'])

    # assignments — 근무 배정 (One per worker per slot)
    op.create_table(
        'assignments',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('schedule_id', UUID(as_uuid=True), sa.ForeignKey('schedules.id', ondelete='CASCADE'), nullable=False),
        sa.Column('slot_id', UUID(as_uuid=True), sa.ForeignKey('shift_slots.id', ondelete='CASCADE'), nullable=False),
        sa.Column('worker_id', UUID(as_uuid=True), sa.ForeignKey('workers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('role', sa.String(30), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('break_minutes', sa.Integer(), server_default='120', nullable=False),
        sa.Column('regular_hours', sa.Float(), server_default='0', nullable=False),
        sa.Column('overtime_hours', sa.Float(), server_default='0', nullable=False),
        sa.Column('consecutive_days', sa.Integer(), server_default='0', nullable=False),
        sa.Column('locked', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('slot_id', 'worker_id', name='uq_assignment_slot_worker'),
    )
    op.create_index('ix_assignments_schedule', 'assignments', ['schedule_id'])

    # schedule_reviews — 검토 이력 (One record per review stage entered)
    op.create_table(
        'schedule_reviews',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('schedule_id', UUID(as_uuid=True), sa.ForeignKey('schedules.id', ondelete='CASCADE'), nullable=False),
        sa.Column('stage', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), server_default='pending', nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('decided_by', sa.String(100), nullable=True),
        sa.Column('decided_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_schedule_reviews_schedule', 'schedule_reviews', ['schedule_id'])

    # notifications — 매장 알림 (Workflow notifications)
    op.create_table(
        'notifications',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('store_id', UUID(as_uuid=True), sa.ForeignKey('stores.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('message', sa.String(1000), nullable=False),
        sa.Column('reference_type', sa.String(50), nullable=True),
        sa.Column('reference_id', UUID(as_uuid=True), nullable=True),
        sa.Column('is_read', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_notifications_store_created', 'notifications', ['store_id', 'created_at'])


def downgrade() -> None:
    op.drop_index('ix_notifications_store_created', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index('ix_schedule_reviews_schedule', table_name='schedule_reviews')
    op.drop_table('schedule_reviews')
    op.drop_index('ix_assignments_schedule', table_name='assignments')
    op.drop_table('assignments')
    op.drop_index('ix_shift_slots_store_date', table_name='shift_slots')
    op.drop_table('shift_slots')
    op.drop_index('ix_schedules_status_deadline', table_name='schedules')
    op.drop_table('schedules')
    op.drop_index('ix_time_off_store_date', table_name='time_off_requests')
    op.drop_table('time_off_requests')
    op.drop_index('ix_workers_store', table_name='workers')
    op.drop_table('workers')
    op.drop_table('labor_policies')
    op.drop_table('stores')
