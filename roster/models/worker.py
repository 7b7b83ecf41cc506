"""근무자 및 휴가 SQLAlchemy ORM 모델 정의.

Worker (roster) and time-off SQLAlchemy ORM model definitions.
The scheduling core only reads these rows.

Tables:
    - workers: 매장 소속 근무자 (Store roster)
    - time_off_requests: 휴가 신청 (Time-off requests; approved ones block scheduling)
"""

import uuid
from datetime import date, datetime

from sqlalchemy import JSON, Boolean, Date, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from roster.database import Base, UTCDateTime, utc_now


class Worker(Base):
    """근무자 모델 — 구분(정규/파트), 주 역할, 보유 스킬, 파트타임 근무 유형.

    Worker model.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        store_id: 소속 매장 FK (Store the worker belongs to)
        name: 이름 (Display name)
        emp_no: 사번, 선택 (Employee number, unique when present)
        category: 구분 (full_time | part_time)
        primary_role: 주 역할 (Primary role, one of ROLE_PRIORITY)
        skills: 배정 가능한 역할 목록 (Roles the worker may fill; "all" matches any)
        pt_shift_type: 파트타임 근무 유형 (Part-time shift restriction, optional)
        is_active: 활성 상태 (Inactive workers are never scheduled)
    """

    __tablename__ = "workers"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    emp_no: Mapped[str | None] = mapped_column(String(50), nullable=True, unique=True)
    category: Mapped[str] = mapped_column(String(20), nullable=False)
    primary_role: Mapped[str] = mapped_column(String(30), nullable=False)
    skills: Mapped[list] = mapped_column(JSON().with_variant(JSONB(), "postgresql"), default=list)
    pt_shift_type: Mapped[str | None] = mapped_column(String(40), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, onupdate=utc_now)

    __table_args__ = (Index("ix_workers_store", "store_id"),)


class TimeOffRequest(Base):
    """휴가 신청 모델.

    Time-off request for one worker and one date.
    Only status="approved" rows exclude the worker from auto-assignment.
    """

    __tablename__ = "time_off_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)
    worker_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("workers.id", ondelete="CASCADE"), nullable=False)
    off_date: Mapped[date] = mapped_column(Date, nullable=False)
    # 유형 — sick | personal | vacation
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    # 상태 — pending | approved | rejected
    status: Mapped[str] = mapped_column(String(20), default="pending")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)

    __table_args__ = (Index("ix_time_off_store_date", "store_id", "off_date"),)
