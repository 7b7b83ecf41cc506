"""스케줄 레포지토리 — 스케줄, 슬롯, 배정, 검토 기록 DB 쿼리 담당.

Schedule Repository — Handles schedule, shift slot, assignment, and review
record queries.

Status changes never read-then-write: set_status_and_deadline and
decide_review issue a single conditional UPDATE and report whether a row
matched. A False result means another writer (a reviewer or the SLA sweep)
got there first.
"""

from datetime import date, datetime, timedelta
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Select, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from roster.constants import REVIEW_PENDING, REVIEW_STATUSES
from roster.database import utc_now
from roster.models.schedule import Assignment, ReviewRecord, Schedule, ShiftSlot
from roster.repositories.base import BaseRepository


class ScheduleRepository(BaseRepository[Schedule]):
    """스케줄 레포지토리.

    Schedule repository with filtering, conditional transitions, and
    review record management.

    Extends:
        BaseRepository[Schedule]
    """

    def __init__(self) -> None:
        super().__init__(Schedule)

    async def get_by_store_week(self, db: AsyncSession, store_id: UUID, week_start: date) -> Schedule | None:
        """매장+주 스케줄 조회 — Fetch the schedule for a store-week, if any."""
        result = await db.execute(
            select(Schedule).where(Schedule.store_id == store_id, Schedule.week_start == week_start)
        )
        return result.scalar_one_or_none()

    async def get_by_filters(
        self,
        db: AsyncSession,
        store_id: UUID | None = None,
        status: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Schedule], int]:
        """필터 조건에 맞는 스케줄을 페이지네이션하여 조회합니다.

        Retrieve paginated schedules, newest week first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            store_id: 매장 UUID 필터, 선택 (Optional store filter)
            status: 상태 필터, 선택 (Optional status filter)
            page: 페이지 번호, 1부터 시작 (Page number, 1-based)
            per_page: 페이지당 항목 수 (Items per page)

        Returns:
            tuple[Sequence[Schedule], int]: (스케줄 목록, 전체 개수)
        """
        query: Select = select(Schedule)
        if store_id is not None:
            query = query.where(Schedule.store_id == store_id)
        if status is not None:
            query = query.where(Schedule.status == status)
        query = query.order_by(Schedule.week_start.desc(), Schedule.created_at.desc())
        return await self.get_paginated(db, query, page, per_page)

    async def set_status_and_deadline(
        self,
        db: AsyncSession,
        schedule_id: UUID,
        expected_status: str,
        status: str,
        deadline: datetime | None,
        expected_deadline: datetime | None = None,
    ) -> bool:
        """조건부 상태 전이 (compare-and-swap).

        Move a schedule to ``status`` only if it is still in
        ``expected_status`` (and, when given, still carries
        ``expected_deadline``). A schedule already loaded in the session is reloaded after a
        successful transition.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            schedule_id: 스케줄 UUID (Schedule UUID)
            expected_status: 현재 기대 상태 (Status the row must still have)
            status: 새 상태 (New status)
            deadline: 새 SLA 마감, None이면 해제 (New SLA deadline; None clears it)
            expected_deadline: 기대 마감, 선택 (Deadline the row must still have)

        Returns:
            bool: 전이 적용 여부 (True when exactly this call applied the transition)
        """
        stmt = (
            update(Schedule)
            .where(Schedule.id == schedule_id, Schedule.status == expected_status)
            .values(status=status, sla_deadline_at=deadline, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        if expected_deadline is not None:
            stmt = stmt.where(Schedule.sla_deadline_at == expected_deadline)
        result = await db.execute(stmt)
        if result.rowcount != 1:
            return False
        # 세션에 로드된 객체 갱신 — Reload the identity-mapped instance
        await db.get(Schedule, schedule_id, populate_existing=True)
        return True

    async def list_overdue(self, db: AsyncSession, now: datetime) -> Sequence[Schedule]:
        """SLA 마감이 지난 검토 중 스케줄 조회.

        Schedules in a review status whose deadline is before ``now``,
        oldest deadline first.
        """
        result = await db.execute(
            select(Schedule)
            .where(
                Schedule.status.in_(REVIEW_STATUSES),
                Schedule.sla_deadline_at.is_not(None),
                Schedule.sla_deadline_at < now,
            )
            .order_by(Schedule.sla_deadline_at, Schedule.id)
        )
        return result.scalars().all()

    # --- 검토 기록 (Review records) ---

    async def create_review(self, db: AsyncSession, data: dict[str, Any]) -> ReviewRecord:
        """검토 기록 생성 — Create a review record (pending unless stated)."""
        review = ReviewRecord(**data)
        db.add(review)
        await db.flush()
        await db.refresh(review)
        return review

    async def get_review(self, db: AsyncSession, review_id: UUID) -> ReviewRecord | None:
        result = await db.execute(select(ReviewRecord).where(ReviewRecord.id == review_id))
        return result.scalar_one_or_none()

    async def list_reviews(self, db: AsyncSession, schedule_id: UUID) -> Sequence[ReviewRecord]:
        """스케줄 검토 이력 — Review history, oldest first."""
        result = await db.execute(
            select(ReviewRecord)
            .where(ReviewRecord.schedule_id == schedule_id)
            .order_by(ReviewRecord.created_at, ReviewRecord.id)
        )
        return result.scalars().all()

    async def get_pending_review(self, db: AsyncSession, schedule_id: UUID, stage: str) -> ReviewRecord | None:
        """단계의 대기 중 검토 기록 — The newest pending review for a stage."""
        result = await db.execute(
            select(ReviewRecord)
            .where(
                ReviewRecord.schedule_id == schedule_id,
                ReviewRecord.stage == stage,
                ReviewRecord.status == REVIEW_PENDING,
            )
            .order_by(ReviewRecord.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def decide_review(
        self,
        db: AsyncSession,
        review_id: UUID,
        status: str,
        decided_by: str,
        decided_at: datetime,
        comment: str | None = None,
    ) -> bool:
        """조건부 검토 결정 — Record a decision only while the review is pending.

        Returns:
            bool: 결정 적용 여부 (False when the review was no longer pending)
        """
        values: dict[str, Any] = {"status": status, "decided_by": decided_by, "decided_at": decided_at}
        if comment is not None:
            values["comment"] = comment
        result = await db.execute(
            update(ReviewRecord)
            .where(ReviewRecord.id == review_id, ReviewRecord.status == REVIEW_PENDING)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False
        await db.get(ReviewRecord, review_id, populate_existing=True)
        return True

    async def close_pending_reviews(
        self,
        db: AsyncSession,
        schedule_id: UUID,
        status: str,
        decided_by: str,
        decided_at: datetime,
        comment: str | None = None,
    ) -> None:
        """대기 중 검토 일괄 종료 — Decide every pending review of a schedule."""
        await db.execute(
            update(ReviewRecord)
            .where(ReviewRecord.schedule_id == schedule_id, ReviewRecord.status == REVIEW_PENDING)
            .values(status=status, decided_by=decided_by, decided_at=decided_at, comment=comment)
            .execution_options(synchronize_session="fetch")
        )


class ShiftSlotRepository(BaseRepository[ShiftSlot]):
    """슬롯/배정 레포지토리.

    Shift slot and assignment storage for one store-week.
    """

    def __init__(self) -> None:
        super().__init__(ShiftSlot)

    async def list_slots(self, db: AsyncSession, schedule_id: UUID) -> Sequence[ShiftSlot]:
        result = await db.execute(
            select(ShiftSlot)
            .where(ShiftSlot.schedule_id == schedule_id)
            .order_by(ShiftSlot.work_date, ShiftSlot.period)
        )
        return result.scalars().all()

    async def list_assignments(self, db: AsyncSession, schedule_id: UUID) -> Sequence[Assignment]:
        """스케줄 배정 목록 — Assignments ordered by slot date, period, then role."""
        result = await db.execute(
            select(Assignment)
            .join(ShiftSlot, ShiftSlot.id == Assignment.slot_id)
            .where(Assignment.schedule_id == schedule_id)
            .order_by(ShiftSlot.work_date, ShiftSlot.period, Assignment.role, Assignment.worker_id)
        )
        return result.scalars().all()

    async def list_worker_assignments(
        self,
        db: AsyncSession,
        worker_id: UUID,
        date_from: date,
        date_to: date,
    ) -> list[tuple[Assignment, ShiftSlot]]:
        """근무자의 기간 내 배정 — A worker's assignments in [date_from, date_to] with their slots.

        Spans schedules, so checks near a week boundary see the adjacent week.
        """
        result = await db.execute(
            select(Assignment, ShiftSlot)
            .join(ShiftSlot, ShiftSlot.id == Assignment.slot_id)
            .where(
                Assignment.worker_id == worker_id,
                ShiftSlot.work_date >= date_from,
                ShiftSlot.work_date <= date_to,
            )
            .order_by(ShiftSlot.work_date, ShiftSlot.period)
        )
        return [(assignment, slot) for assignment, slot in result.all()]

    async def replace_week(
        self,
        db: AsyncSession,
        schedule_id: UUID,
        store_id: UUID,
        week_start: date,
        slots: list[dict[str, Any]],
        assignments: list[dict[str, Any]],
    ) -> tuple[list[ShiftSlot], list[Assignment]]:
        """매장의 해당 주 슬롯/배정을 통째로 교체합니다.

        Replace every slot and assignment of the store-week. The deletes and
        inserts run in the caller's session transaction, so readers see
        either the previous set or the new one after commit.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            schedule_id: 소유 스케줄 UUID (Owning schedule)
            store_id: 매장 UUID (Store UUID)
            week_start: 주 시작일 (Monday of the week)
            slots: 슬롯 데이터 (work_date, period, min_staffing)
            assignments: 배정 데이터, (work_date, period)로 슬롯과 연결
                         (Assignment data keyed to slots by work_date + period)

        Returns:
            tuple[list[ShiftSlot], list[Assignment]]: 생성된 슬롯과 배정
        """
        week_end = week_start + timedelta(days=6)
        week_slot_ids = select(ShiftSlot.id).where(
            ShiftSlot.store_id == store_id,
            ShiftSlot.work_date >= week_start,
            ShiftSlot.work_date <= week_end,
        )
        await db.execute(
            delete(Assignment)
            .where(Assignment.slot_id.in_(week_slot_ids))
            .execution_options(synchronize_session=False)
        )
        await db.execute(
            delete(ShiftSlot)
            .where(
                ShiftSlot.store_id == store_id,
                ShiftSlot.work_date >= week_start,
                ShiftSlot.work_date <= week_end,
            )
            .execution_options(synchronize_session=False)
        )

        new_slots = [ShiftSlot(schedule_id=schedule_id, store_id=store_id, **data) for data in slots]
        db.add_all(new_slots)
        await db.flush()

        slot_ids = {(slot.work_date, slot.period): slot.id for slot in new_slots}
        new_assignments = []
        for data in assignments:
            values = dict(data)
            key = (values.pop("work_date"), values.pop("period"))
            new_assignments.append(
                Assignment(schedule_id=schedule_id, slot_id=slot_ids[key], **values)
            )
        db.add_all(new_assignments)
        await db.flush()
        return new_slots, new_assignments


# 싱글턴 인스턴스 — Singleton instances
schedule_repository: ScheduleRepository = ScheduleRepository()
shift_slot_repository: ShiftSlotRepository = ShiftSlotRepository()
