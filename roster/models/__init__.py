"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
test schema creation.

Modules:
    store: 매장, 노동 정책 (Store, LaborPolicy)
    worker: 근무자, 휴가 신청 (Worker, TimeOffRequest)
    schedule: 스케줄, 슬롯, 배정, 검토 이력 (Schedule, ShiftSlot, Assignment, ReviewRecord)
    notification: 알림 (Notification)
"""

from roster.models.store import Store, LaborPolicy
from roster.models.worker import Worker, TimeOffRequest
from roster.models.schedule import Schedule, ShiftSlot, Assignment, ReviewRecord
from roster.models.notification import Notification

__all__ = [
    "Store", "LaborPolicy",
    "Worker", "TimeOffRequest",
    "Schedule", "ShiftSlot", "Assignment", "ReviewRecord",
    "Notification",
]
