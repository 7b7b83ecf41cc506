"""스케줄/배정/승인 Pydantic 스키마.

Schedule, assignment, and approval schemas.

The first group (snapshots and drafts) is the plain-data input/output of the
rules engine and the auto-assignment heuristic; the second group is the
request/response surface of the admin API.
"""

from datetime import date, datetime, time
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from roster.schemas.roster import WorkerProfile
from roster.schemas.rules import ValidationIssue, ValidationResult

Period = Literal["AM", "PM"]


# === 규칙 엔진 입력 스냅샷 (Rules-engine snapshots) ===

class SlotSnapshot(BaseModel):
    """슬롯 스냅샷 — (date, period) with per-role minimum staffing."""

    work_date: date
    period: Period
    min_staffing: dict[str, int] = Field(default_factory=dict)


class AssignmentSnapshot(BaseModel):
    """배정 스냅샷.

    Assignment snapshot. ``end_time <= start_time`` means the shift ends on
    the following day.
    """

    worker_id: str
    work_date: date
    period: Period
    role: str
    start_time: time
    end_time: time
    break_minutes: int = Field(120, ge=0)


class WeekSnapshot(BaseModel):
    """주간 검증 입력 — One store-week as seen by validate_week."""

    week_start: date
    workers: list[WorkerProfile] = Field(default_factory=list)
    slots: list[SlotSnapshot] = Field(default_factory=list)
    assignments: list[AssignmentSnapshot] = Field(default_factory=list)


class PlannedAssignment(AssignmentSnapshot):
    """자동 배정 결과 — Assignment with its derived hours."""

    regular_hours: float = 0
    overtime_hours: float = 0
    consecutive_days: int = 0


class DraftPlan(BaseModel):
    """자동 배정 초안 — Slots, assignments, and advisory warnings (not persisted)."""

    slots: list[SlotSnapshot]
    assignments: list[PlannedAssignment]
    warnings: list[ValidationIssue] = Field(default_factory=list)


# === 스케줄 API (Schedule API) ===

class ScheduleCreate(BaseModel):
    """스케줄 생성 요청 — week_start must be a Monday."""

    store_id: UUID
    week_start: date
    created_by: str | None = None

    @field_validator("week_start")
    @classmethod
    def _monday(cls, value: date) -> date:
        if value.weekday() != 0:
            raise ValueError("week_start must be a Monday")
        return value


class ScheduleResponse(BaseModel):
    id: str
    store_id: str
    week_start: date
    status: str
    sla_deadline_at: datetime | None
    created_by: str | None
    created_at: datetime


class SlotResponse(BaseModel):
    id: str
    work_date: date
    period: str
    min_staffing: dict[str, int]


class AssignmentResponse(BaseModel):
    """배정 응답 — ``is_peak`` is informational only."""

    id: str
    slot_id: str
    worker_id: str
    worker_name: str | None = None
    work_date: date
    period: str
    role: str
    start_time: str  # "HH:MM"
    end_time: str
    break_minutes: int
    regular_hours: float
    overtime_hours: float
    consecutive_days: int
    is_peak: bool


class ScheduleDetailResponse(ScheduleResponse):
    """스케줄 상세 — slots, assignments, and weekly hours per worker id."""

    slots: list[SlotResponse]
    assignments: list[AssignmentResponse]
    weekly_hours: dict[str, float]


class DraftResult(BaseModel):
    """자동 배정 결과 응답.

    Response of draft generation. The draft is persisted and returned with
    its validation result even when staffing gaps remain.
    """

    schedule_id: str
    week_start: date
    shift_slots_created: int
    assignments_created: int
    warnings: list[ValidationIssue]
    validation: ValidationResult


class ProposedAssignment(BaseModel):
    """단건 배정 검증 요청 — Checked against the worker's other assignments in the schedule."""

    worker_id: UUID
    work_date: date
    period: Period
    role: str
    start_time: time
    end_time: time
    break_minutes: int = Field(120, ge=0)


# === 승인 흐름 (Approval flow) ===

class SubmitRequest(BaseModel):
    """검토 제출 요청 — stage is "supervisor" or "area_manager"."""

    stage: str
    submitted_by: str | None = None


class WithdrawRequest(BaseModel):
    withdrawn_by: str | None = None
    reason: str | None = None


class ReviewDecisionRequest(BaseModel):
    """검토 결정 요청 — outcome is "approved" or "rejected"."""

    outcome: str
    comment: str | None = None
    decider_id: str = Field(..., min_length=1, max_length=100)


class ReviewResponse(BaseModel):
    id: str
    schedule_id: str
    stage: str
    status: str
    comment: str | None
    decided_by: str | None
    decided_at: datetime | None
    created_at: datetime


class SlaSweepRequest(BaseModel):
    """수동 SLA 점검 요청 — ``now`` defaults to the current time."""

    now: datetime | None = None


class SlaSweepResponse(BaseModel):
    advanced: list[str]
    count: int
