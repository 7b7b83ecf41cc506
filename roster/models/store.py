"""매장 및 노동 정책 SQLAlchemy ORM 모델 정의.

Store and labor-policy SQLAlchemy ORM model definitions.

Tables:
    - stores: 매장 (Store / location whose roster is scheduled)
    - labor_policies: 매장별 노동 정책 (Per-store labor-policy overrides)
"""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, Float, ForeignKey, Integer, String, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from roster.database import Base, UTCDateTime, utc_now


class Store(Base):
    """매장 모델 — 주간 스케줄이 작성되는 사업장 단위.

    Store (location) model. Workers, schedules, and shift slots are scoped to a store.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 매장 이름 (Store name)
        business_hours: 영업시간 표기 (Display string, e.g. "10:00-22:00")
        is_active: 활성 상태 (Active status flag)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "stores"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    business_hours: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, onupdate=utc_now)


class LaborPolicy(Base):
    """노동 정책 모델 — 매장별 근무 한도, 휴게, 최소 인원 기준값.

    Labor policy model — Per-store overrides for the rules engine.
    A store without a row uses the built-in defaults (see RulesConfig).

    Attributes:
        store_id: 소속 매장 FK, 매장당 1개 (One policy per store)
        ft_max_daily_hours / pt_max_daily_hours: 일일 최대 근무시간
        ft_max_consecutive_days / pt_max_consecutive_days: 최대 연속 근무일
        regular_hours_threshold: 일 정규 근무 기준 (Overtime starts above this)
        min_break_minutes: 최소 휴게 (Below this the assignment is invalid)
        standard_break_minutes: 표준 휴게 (Below this the assignment is flagged)
        weekly_day_factor: 주간 한도 배수 (Weekly max = daily max x factor)
        fairness_spread_threshold: 공정성 편차 한도 (Max-min ratio spread before warning)
        min_staffing: 역할별 최소 인원 (Per-role minimum headcount per slot)
    """

    __tablename__ = "labor_policies"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    store_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    ft_max_daily_hours: Mapped[float] = mapped_column(Float, default=12)
    pt_max_daily_hours: Mapped[float] = mapped_column(Float, default=10)
    ft_max_consecutive_days: Mapped[int] = mapped_column(Integer, default=5)
    pt_max_consecutive_days: Mapped[int] = mapped_column(Integer, default=6)
    regular_hours_threshold: Mapped[float] = mapped_column(Float, default=8)
    min_break_minutes: Mapped[int] = mapped_column(Integer, default=30)
    standard_break_minutes: Mapped[int] = mapped_column(Integer, default=120)
    weekly_day_factor: Mapped[int] = mapped_column(Integer, default=6)
    fairness_spread_threshold: Mapped[float] = mapped_column(Float, default=0.3)
    # 역할별 최소 인원 — {"cashier": 1, ...}
    min_staffing: Mapped[dict] = mapped_column(JSON().with_variant(JSONB(), "postgresql"), default=dict)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, onupdate=utc_now)
