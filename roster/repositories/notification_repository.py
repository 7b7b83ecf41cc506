"""알림 레포지토리 — Notification repository."""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from roster.models.notification import Notification
from roster.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """알림 레포지토리.

    Notification repository, newest first.
    """

    def __init__(self) -> None:
        super().__init__(Notification)

    async def get_by_store(
        self,
        db: AsyncSession,
        store_id: UUID,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Notification], int]:
        query: Select = (
            select(Notification)
            .where(Notification.store_id == store_id)
            .order_by(Notification.created_at.desc(), Notification.id)
        )
        return await self.get_paginated(db, query, page, per_page)


notification_repository: NotificationRepository = NotificationRepository()
