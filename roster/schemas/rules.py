"""규칙 엔진 설정 및 검증 결과 스키마.

Rules-engine configuration snapshot and validation result schemas.
RulesConfig is an immutable value passed into each RulesEngine instance;
there is no process-wide rule state.
"""

from datetime import date, time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from roster.constants import (
    AM,
    FULL_DAY,
    FULL_TIME,
    PART_TIME,
    PM,
    ROLE_PRIORITY,
    WEEKDAY_EVENING_ONLY,
    WEEKEND_EVENING_ONLY,
)


class WorkLimit(BaseModel):
    """근무 구분별 한도 — Per-category working limits."""

    model_config = ConfigDict(frozen=True)

    max_daily_hours: float
    max_consecutive_days: int
    regular_hours: float = 8


class PartTimeShiftRule(BaseModel):
    """파트타임 근무 유형 규칙.

    Part-time shift-type rule. ``weekday_only`` bars weekend dates even when
    ``weekend_only`` is False (the weekday-evening entry uses it).
    """

    model_config = ConfigDict(frozen=True)

    description: str = ""
    allowed_periods: tuple[str, ...]
    weekend_only: bool = False
    weekday_only: bool = False


class TimeWindow(BaseModel):
    """시작~종료 시각 구간 — Clock-time window."""

    model_config = ConfigDict(frozen=True)

    start: time
    end: time


def _default_work_limits() -> dict[str, WorkLimit]:
    return {
        FULL_TIME: WorkLimit(max_daily_hours=12, max_consecutive_days=5, regular_hours=8),
        PART_TIME: WorkLimit(max_daily_hours=10, max_consecutive_days=6, regular_hours=8),
    }


def _default_pt_shift_types() -> dict[str, PartTimeShiftRule]:
    return {
        WEEKDAY_EVENING_ONLY: PartTimeShiftRule(
            description="Weekday evenings only",
            allowed_periods=(PM,),
            weekday_only=True,
        ),
        WEEKEND_EVENING_ONLY: PartTimeShiftRule(
            description="Weekend evenings only",
            allowed_periods=(PM,),
            weekend_only=True,
        ),
        FULL_DAY: PartTimeShiftRule(
            description="Full day, same hours as full-time",
            allowed_periods=(AM, PM),
        ),
    }


def _default_meal_periods() -> dict[str, TimeWindow]:
    return {
        AM: TimeWindow(start=time(10, 0), end=time(14, 0)),
        PM: TimeWindow(start=time(18, 0), end=time(22, 0)),
    }


def _default_period_hours() -> dict[str, TimeWindow]:
    # PM 블록은 자정을 넘김 (PM block wraps past midnight)
    return {
        AM: TimeWindow(start=time(9, 0), end=time(17, 0)),
        PM: TimeWindow(start=time(17, 0), end=time(1, 0)),
    }


class RulesConfig(BaseModel):
    """노동 정책 설정 스냅샷.

    Labor-policy configuration snapshot consumed by RulesEngine and the
    auto-assignment heuristic. Every value has a default and can be
    overridden per store through the labor_policies table.

    Attributes:
        work_limits: 구분별 일일/연속 한도 (Daily and consecutive-day limits per category)
        min_break_minutes: 최소 휴게 (Below → violation)
        standard_break_minutes: 표준 휴게 (Below → warning; shortfall counts toward overtime)
        weekly_day_factor: 주간 한도 = 일일 한도 x 배수 (Weekly ceiling factor)
        fairness_spread_threshold: 공정성 편차 한도 (Ratio spread before warning)
        min_staffing: 역할별 최소 인원 (Per-role minimum per date x period)
        pt_shift_types: 파트타임 유형 표 (Part-time eligibility table)
        meal_periods: 피크 판정 구간 (Peak windows, reporting only)
        period_hours: 자동 배정 기본 근무시간 (Default hours per period for drafts)
        default_break_minutes: 자동 배정 기본 휴게 (Default break for drafts)
    """

    model_config = ConfigDict(frozen=True)

    work_limits: dict[str, WorkLimit] = Field(default_factory=_default_work_limits)
    min_break_minutes: int = 30
    standard_break_minutes: int = 120
    weekly_day_factor: int = 6
    fairness_spread_threshold: float = 0.3
    min_staffing: dict[str, int] = Field(default_factory=lambda: {role: 1 for role in ROLE_PRIORITY})
    pt_shift_types: dict[str, PartTimeShiftRule] = Field(default_factory=_default_pt_shift_types)
    meal_periods: dict[str, TimeWindow] = Field(default_factory=_default_meal_periods)
    period_hours: dict[str, TimeWindow] = Field(default_factory=_default_period_hours)
    default_break_minutes: int = 120

    def limit_for(self, category: str) -> WorkLimit:
        """구분별 한도 조회 — unknown categories fall back to full-time limits."""
        return self.work_limits.get(category) or self.work_limits[FULL_TIME]


class WorkHours(BaseModel):
    """근무시간 계산 결과 — Worked-time split."""

    model_config = ConfigDict(frozen=True)

    worked_minutes: int
    total_hours: float
    regular_hours: float
    overtime_hours: float


class ValidationIssue(BaseModel):
    """검증 위반/경고 항목.

    One violation or warning. ``code`` is stable and machine-readable;
    ``message`` is for people.
    """

    code: str
    message: str
    worker_id: str | None = None
    work_date: date | None = None
    period: str | None = None
    role: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)


class ValidationResult(BaseModel):
    """검증 결과 — violations block leaving draft, warnings never block."""

    valid: bool
    violations: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)


class LaborPolicyUpdate(BaseModel):
    """노동 정책 저장 요청 — Per-store labor policy upsert body."""

    ft_max_daily_hours: float = Field(12, gt=0)
    pt_max_daily_hours: float = Field(10, gt=0)
    ft_max_consecutive_days: int = Field(5, ge=1)
    pt_max_consecutive_days: int = Field(6, ge=1)
    regular_hours_threshold: float = Field(8, gt=0)
    min_break_minutes: int = Field(30, ge=0)
    standard_break_minutes: int = Field(120, ge=0)
    weekly_day_factor: int = Field(6, ge=1, le=7)
    fairness_spread_threshold: float = Field(0.3, ge=0, le=1)
    min_staffing: dict[str, int] = Field(default_factory=lambda: {role: 1 for role in ROLE_PRIORITY})


class LaborPolicyResponse(LaborPolicyUpdate):
    """노동 정책 응답 — ``id`` is None when the store still uses defaults."""

    id: str | None
    store_id: str
