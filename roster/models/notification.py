"""알림 SQLAlchemy ORM 모델 정의.

Notification SQLAlchemy ORM model definition.
Records schedule workflow events for a store; delivery channels
(messaging, email) are handled outside this service.

Tables:
    - notifications: 매장 알림 (Store-scoped workflow notifications)
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from roster.database import Base, UTCDateTime, utc_now


class Notification(Base):
    """알림 모델 — 스케줄 승인 흐름에서 발생한 이벤트.

    Notification model.

    Notification Types (type 필드 값):
        - "schedule_submitted": 검토 요청 (Schedule entered a review stage)
        - "review_decided": 검토 결정 (A reviewer approved or rejected)
        - "schedule_published": 게시 완료 (Schedule reached published)
        - "sla_auto_approved": SLA 초과 자동 승인 (Review stage timed out)

    Reference Types (reference_type 필드 값):
        - "schedule": Schedule 참조
        - "review": ReviewRecord 참조
    """

    __tablename__ = "notifications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    message: Mapped[str] = mapped_column(String(1000), nullable=False)
    reference_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    reference_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)

    __table_args__ = (Index("ix_notifications_store_created", "store_id", "created_at"),)
