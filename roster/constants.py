"""도메인 상수 — 역할, 근무 구분, 스케줄 상태, 검토 단계.

Domain constants shared by models, schemas, and services.
Values are stored as plain strings in the database.
"""

# 근무 구분 — Worker categories
FULL_TIME: str = "full_time"
PART_TIME: str = "part_time"
WORKER_CATEGORIES: tuple[str, ...] = (FULL_TIME, PART_TIME)

# 시간대 — Half-day periods
AM: str = "AM"
PM: str = "PM"
PERIODS: tuple[str, ...] = (AM, PM)

# 역할 — 자동 배정 우선순위 순서 (Roles in auto-assignment priority order)
ROLE_PRIORITY: tuple[str, ...] = (
    "cashier",
    "reception",
    "tea_service",
    "runner",
    "plating",
    "clearing",
    "beverage",
    "control",
)
ALL_SKILLS: str = "all"

# 파트타임 근무 유형 — Part-time shift types
WEEKDAY_EVENING_ONLY: str = "weekday_evening_only"
WEEKEND_EVENING_ONLY: str = "weekend_evening_only"
FULL_DAY: str = "full_day"

# 스케줄 상태 — Schedule lifecycle
STATUS_DRAFT: str = "draft"
STATUS_REVIEW_1: str = "review_stage_1"
STATUS_REVIEW_2: str = "review_stage_2"
STATUS_PUBLISHED: str = "published"
REVIEW_STATUSES: tuple[str, ...] = (STATUS_REVIEW_1, STATUS_REVIEW_2)

# 검토 단계 — Review stages and the schedule status each one puts a schedule in
STAGE_SUPERVISOR: str = "supervisor"
STAGE_AREA_MANAGER: str = "area_manager"
STAGE_STATUS: dict[str, str] = {
    STAGE_SUPERVISOR: STATUS_REVIEW_1,
    STAGE_AREA_MANAGER: STATUS_REVIEW_2,
}

# 검토 기록 상태 — Review record outcomes
REVIEW_PENDING: str = "pending"
REVIEW_APPROVED: str = "approved"
REVIEW_REJECTED: str = "rejected"

# SLA 자동 승인 시 기록되는 결정자 — Decider recorded on SLA auto-approval
SLA_TIMEOUT_ACTOR: str = "sla-timeout"

# 휴가 — Time-off request types and statuses
TIME_OFF_TYPES: tuple[str, ...] = ("sick", "personal", "vacation")
TIME_OFF_STATUSES: tuple[str, ...] = ("pending", "approved", "rejected")
