"""근무자/휴가 레포지토리.

Worker and time-off repositories. These are the roster collaborators of
the scheduling core: the core only reads workers and approved time off.
"""

from datetime import date
from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from roster.models.worker import TimeOffRequest, Worker
from roster.repositories.base import BaseRepository


class WorkerRepository(BaseRepository[Worker]):
    """근무자 레포지토리 — Worker repository."""

    def __init__(self) -> None:
        super().__init__(Worker)

    async def list_by_store(
        self,
        db: AsyncSession,
        store_id: UUID,
        active_only: bool = True,
    ) -> Sequence[Worker]:
        """매장 근무자 목록을 조회합니다.

        List a store's workers ordered by name, then id.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            store_id: 매장 UUID (Store UUID)
            active_only: 활성 근무자만 조회 (Skip deactivated workers)

        Returns:
            Sequence[Worker]: 근무자 목록 (Workers)
        """
        query = select(Worker).where(Worker.store_id == store_id)
        if active_only:
            query = query.where(Worker.is_active.is_(True))
        result = await db.execute(query.order_by(Worker.name, Worker.id))
        return result.scalars().all()

    async def emp_no_taken(self, db: AsyncSession, emp_no: str, exclude_id: UUID | None = None) -> bool:
        """사번 중복 확인 — Whether another worker already uses emp_no."""
        query = select(Worker.id).where(Worker.emp_no == emp_no)
        if exclude_id is not None:
            query = query.where(Worker.id != exclude_id)
        result = await db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None


class TimeOffRepository(BaseRepository[TimeOffRequest]):
    """휴가 신청 레포지토리 — Time-off request repository."""

    def __init__(self) -> None:
        super().__init__(TimeOffRequest)

    async def list_by_store(
        self,
        db: AsyncSession,
        store_id: UUID,
        date_from: date | None = None,
        date_to: date | None = None,
        status: str | None = None,
    ) -> Sequence[TimeOffRequest]:
        query = select(TimeOffRequest).where(TimeOffRequest.store_id == store_id)
        if date_from is not None:
            query = query.where(TimeOffRequest.off_date >= date_from)
        if date_to is not None:
            query = query.where(TimeOffRequest.off_date <= date_to)
        if status is not None:
            query = query.where(TimeOffRequest.status == status)
        result = await db.execute(query.order_by(TimeOffRequest.off_date, TimeOffRequest.created_at))
        return result.scalars().all()

    async def list_approved_time_off(
        self,
        db: AsyncSession,
        store_id: UUID,
        date_from: date,
        date_to: date,
    ) -> list[tuple[str, date]]:
        """승인된 휴가 (worker_id, date) 쌍을 조회합니다.

        Approved time off in [date_from, date_to] as (worker_id, date) pairs,
        the shape the availability predicate consumes.
        """
        result = await db.execute(
            select(TimeOffRequest.worker_id, TimeOffRequest.off_date).where(
                TimeOffRequest.store_id == store_id,
                TimeOffRequest.status == "approved",
                TimeOffRequest.off_date >= date_from,
                TimeOffRequest.off_date <= date_to,
            )
        )
        return [(str(worker_id), off_date) for worker_id, off_date in result.all()]


# 싱글턴 인스턴스 — Singleton instances
worker_repository: WorkerRepository = WorkerRepository()
time_off_repository: TimeOffRepository = TimeOffRepository()
