"""스케줄 관련 SQLAlchemy ORM 모델 정의.

Schedule-related SQLAlchemy ORM model definitions.
A schedule is one store's week; it owns its 14 shift slots, the assignments
placed into them, and the review records created as it moves through approval.

Tables:
    - schedules: 주간 스케줄 (Weekly schedule with approval status and SLA deadline)
    - shift_slots: 반일 단위 근무 슬롯 (Date x AM/PM slot with minimum staffing)
    - assignments: 근무 배정 (Worker bound to a slot with concrete hours and role)
    - schedule_reviews: 검토 이력 (One record per review stage entered)
"""

import uuid
from datetime import date, datetime, time

from sqlalchemy import JSON, Boolean, Date, Float, ForeignKey, Index, Integer, String, Text, Time, UniqueConstraint, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from roster.database import Base, UTCDateTime, utc_now


class Schedule(Base):
    """주간 스케줄 모델 — 매장 1곳의 월요일 시작 1주.

    Weekly schedule model.

    Status Flow:
        draft → review_stage_1 → review_stage_2 → published
        - draft: 작성 중, 자동 배정/수정 가능 (Editable; auto-assignment allowed)
        - review_stage_1: 현장 책임자 검토 중 (Supervisor review, SLA deadline set)
        - review_stage_2: 지역 매니저 검토 중 (Area manager review, SLA deadline reset)
        - published: 게시 완료, 종료 상태 (Terminal)

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        store_id: 매장 FK (Store this week belongs to)
        week_start: 주 시작일, 항상 월요일 (Monday of the week)
        status: 상태 (See status flow)
        sla_deadline_at: 검토 단계 SLA 마감 (Set only while in a review status)
        created_by: 작성자 식별자 (Creator identity, free-form)
    """

    __tablename__ = "schedules"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)
    week_start: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="draft")
    sla_deadline_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        UniqueConstraint("store_id", "week_start", name="uq_schedule_store_week"),
        Index("ix_schedules_status_deadline", "status", "sla_deadline_at"),
    )


class ShiftSlot(Base):
    """근무 슬롯 모델 — 날짜 x 오전/오후.

    Shift slot model — one half-day period on one date.
    Immutable once generated; regeneration replaces the whole week.

    Attributes:
        schedule_id: 소유 스케줄 FK (Owning schedule)
        store_id: 매장 FK (Store, denormalized for week replacement)
        work_date: 근무일 (Date)
        period: 시간대 (AM | PM)
        min_staffing: 역할별 최소 인원 (Per-role minimum headcount)
    """

    __tablename__ = "shift_slots"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    schedule_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("schedules.id", ondelete="CASCADE"), nullable=False)
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    period: Mapped[str] = mapped_column(String(2), nullable=False)
    min_staffing: Mapped[dict] = mapped_column(JSON().with_variant(JSONB(), "postgresql"), default=dict)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)

    __table_args__ = (
        UniqueConstraint("schedule_id", "work_date", "period", name="uq_slot_schedule_date_period"),
        Index("ix_shift_slots_store_date", "store_id", "work_date"),
    )


class Assignment(Base):
    """근무 배정 모델 — 근무자 1명을 슬롯 1개에 배정.

    Assignment model. Derived fields (regular_hours, overtime_hours,
    consecutive_days) are computed when the row is written and are not
    authoritative input.

    Constraints:
        uq_assignment_slot_worker: 슬롯당 근무자 1회 (One assignment per worker per slot)
    """

    __tablename__ = "assignments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    schedule_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("schedules.id", ondelete="CASCADE"), nullable=False)
    slot_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("shift_slots.id", ondelete="CASCADE"), nullable=False)
    worker_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("workers.id", ondelete="CASCADE"), nullable=False)
    role: Mapped[str] = mapped_column(String(30), nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    break_minutes: Mapped[int] = mapped_column(Integer, default=120)
    regular_hours: Mapped[float] = mapped_column(Float, default=0)
    overtime_hours: Mapped[float] = mapped_column(Float, default=0)
    consecutive_days: Mapped[int] = mapped_column(Integer, default=0)
    locked: Mapped[bool] = mapped_column(Boolean, default=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)

    __table_args__ = (
        UniqueConstraint("slot_id", "worker_id", name="uq_assignment_slot_worker"),
        Index("ix_assignments_schedule", "schedule_id"),
    )


class ReviewRecord(Base):
    """검토 이력 모델 — 단계별 승인/반려 기록.

    Review record model — one per review stage entered. A schedule may
    accumulate several records across resubmissions.

    Attributes:
        stage: 검토 단계 (supervisor | area_manager)
        status: 결과 (pending | approved | rejected)
        comment: 코멘트 (Decision comment)
        decided_by: 결정자 식별자 ("sla-timeout" for automatic approvals)
        decided_at: 결정 일시 UTC (Decision timestamp)
    """

    __tablename__ = "schedule_reviews"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    schedule_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("schedules.id", ondelete="CASCADE"), nullable=False)
    stage: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="pending")
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    decided_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    decided_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)

    __table_args__ = (Index("ix_schedule_reviews_schedule", "schedule_id"),)
