"""매장/근무자/휴가 Pydantic 스키마.

Store, worker, and time-off request/response schemas, plus the
WorkerProfile snapshot the rules engine consumes.
"""

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from roster.constants import ALL_SKILLS, ROLE_PRIORITY

WorkerCategory = Literal["full_time", "part_time"]
PartTimeShiftType = Literal["weekday_evening_only", "weekend_evening_only", "full_day"]
TimeOffType = Literal["sick", "personal", "vacation"]
TimeOffStatus = Literal["pending", "approved", "rejected"]


def _check_role(role: str) -> str:
    if role not in ROLE_PRIORITY:
        raise ValueError(f"unknown role '{role}'")
    return role


def _check_skills(skills: list[str]) -> list[str]:
    for skill in skills:
        if skill != ALL_SKILLS:
            _check_role(skill)
    # 순서 유지 중복 제거 (De-duplicate, keep order)
    return list(dict.fromkeys(skills))


class WorkerProfile(BaseModel):
    """규칙 엔진 입력용 근무자 스냅샷.

    Read-only worker snapshot used by the rules engine and the heuristic.
    An empty ``skills`` list means "no skill data".
    """

    id: str
    name: str
    category: WorkerCategory
    primary_role: str
    skills: list[str] = Field(default_factory=list)
    pt_shift_type: str | None = None


# === 매장 (Store) ===

class StoreCreate(BaseModel):
    """매장 생성 요청 — Store creation body."""

    name: str = Field(..., min_length=1, max_length=255)
    business_hours: str | None = None  # 예: "10:00-22:00"


class StoreResponse(BaseModel):
    id: str
    name: str
    business_hours: str | None
    is_active: bool
    created_at: datetime


# === 근무자 (Worker) ===

class WorkerCreate(BaseModel):
    """근무자 등록 요청.

    Worker creation body. ``primary_role`` is added to ``skills`` when missing.
    """

    name: str = Field(..., min_length=1, max_length=100)
    emp_no: str | None = None
    category: WorkerCategory
    primary_role: str
    skills: list[str] = Field(default_factory=list)
    pt_shift_type: PartTimeShiftType | None = None

    @field_validator("primary_role")
    @classmethod
    def _role(cls, value: str) -> str:
        return _check_role(value)

    @field_validator("skills")
    @classmethod
    def _skills(cls, value: list[str]) -> list[str]:
        return _check_skills(value)


class WorkerUpdate(BaseModel):
    """근무자 수정 요청 — only provided fields are changed."""

    name: str | None = None
    emp_no: str | None = None
    category: WorkerCategory | None = None
    primary_role: str | None = None
    skills: list[str] | None = None
    pt_shift_type: PartTimeShiftType | None = None
    is_active: bool | None = None

    @field_validator("primary_role")
    @classmethod
    def _role(cls, value: str | None) -> str | None:
        return None if value is None else _check_role(value)

    @field_validator("skills")
    @classmethod
    def _skills(cls, value: list[str] | None) -> list[str] | None:
        return None if value is None else _check_skills(value)


class WorkerResponse(BaseModel):
    id: str
    store_id: str
    name: str
    emp_no: str | None
    category: str
    primary_role: str
    skills: list[str]
    pt_shift_type: str | None
    is_active: bool


# === 휴가 (Time off) ===

class TimeOffCreate(BaseModel):
    """휴가 신청 생성 — status starts at "pending" unless given."""

    worker_id: UUID
    off_date: date
    type: TimeOffType
    status: TimeOffStatus = "pending"
    notes: str | None = None


class TimeOffStatusUpdate(BaseModel):
    status: TimeOffStatus


class TimeOffResponse(BaseModel):
    id: str
    store_id: str
    worker_id: str
    off_date: date
    type: str
    status: str
    notes: str | None
    created_at: datetime
