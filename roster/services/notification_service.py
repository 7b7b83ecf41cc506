"""알림 서비스 — 스케줄 승인 흐름 알림.

Notification Service — In-app notifications for the approval workflow.
Records are written in the same transaction as the transition they
describe. Delivery channels (email, chat) are not handled here.

Types:
    - schedule_submitted: 검토 단계 진입 (Schedule entered a review stage)
    - review_decided: 검토 결정 (A reviewer approved or rejected)
    - schedule_published: 게시 완료 (Schedule reached published)
    - sla_auto_approved: SLA 초과 자동 승인 (Stage approved by timeout)
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from roster.models.notification import Notification
from roster.models.schedule import ReviewRecord, Schedule
from roster.repositories.notification_repository import notification_repository

_REFERENCE_TYPE: str = "schedule"


class NotificationService:
    """알림 서비스.

    Notification service creating one record per workflow event.
    """

    async def _create(self, db: AsyncSession, schedule: Schedule, type_: str, message: str) -> Notification:
        return await notification_repository.create(db, {
            "store_id": schedule.store_id,
            "type": type_,
            "message": message,
            "reference_type": _REFERENCE_TYPE,
            "reference_id": schedule.id,
        })

    async def list_for_store(
        self,
        db: AsyncSession,
        store_id: UUID,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Notification], int]:
        """매장 알림 목록 — Paginated notifications for a store, newest first."""
        return await notification_repository.get_by_store(db, store_id, page, per_page)

    async def create_for_submit(self, db: AsyncSession, schedule: Schedule, stage: str) -> Notification:
        """검토 제출 알림 — Schedule entered a review stage."""
        return await self._create(
            db, schedule, "schedule_submitted",
            f"Schedule for week of {schedule.week_start.isoformat()} is waiting for {stage} review",
        )

    async def create_for_decision(self, db: AsyncSession, schedule: Schedule, review: ReviewRecord) -> Notification:
        """검토 결정 알림 — A reviewer decided a stage."""
        message = (
            f"{review.stage} review {review.status} for week of {schedule.week_start.isoformat()}"
        )
        if review.comment:
            message += f": {review.comment}"
        return await self._create(db, schedule, "review_decided", message)

    async def create_for_publish(self, db: AsyncSession, schedule: Schedule) -> Notification:
        """게시 알림 — Schedule was published."""
        return await self._create(
            db, schedule, "schedule_published",
            f"Schedule for week of {schedule.week_start.isoformat()} is published",
        )

    async def create_for_sla(self, db: AsyncSession, schedule: Schedule, stage: str) -> Notification:
        """SLA 자동 승인 알림 — A stage passed its deadline and was approved."""
        return await self._create(
            db, schedule, "sla_auto_approved",
            f"{stage} review for week of {schedule.week_start.isoformat()} passed its deadline and was approved",
        )

    def build_response(self, notification: Notification) -> dict:
        return {
            "id": str(notification.id),
            "type": notification.type,
            "message": notification.message,
            "reference_type": notification.reference_type,
            "reference_id": str(notification.reference_id) if notification.reference_id else None,
            "is_read": notification.is_read,
            "created_at": notification.created_at,
        }


# 싱글턴 인스턴스 — Singleton instance
notification_service: NotificationService = NotificationService()
