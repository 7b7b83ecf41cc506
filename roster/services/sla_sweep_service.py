"""SLA 스윕 서비스 — 검토 마감 초과 스케줄 자동 승인.

SLA Sweep Service — Advances schedules whose review deadline has passed
as if the stage had been approved, and the background runner that calls
it on a fixed cadence (hourly by default).

Each overdue schedule is handled in its own transaction. The transition
is conditional on both the status and the deadline the sweep read, so a
human decision that lands first wins and the sweep skips that schedule.
A failure on one schedule rolls back only that schedule.
"""

import asyncio
import contextlib
import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from roster.constants import (
    REVIEW_APPROVED,
    REVIEW_PENDING,
    SLA_TIMEOUT_ACTOR,
    STAGE_AREA_MANAGER,
    STAGE_SUPERVISOR,
    STATUS_PUBLISHED,
    STATUS_REVIEW_1,
    STATUS_REVIEW_2,
)
from roster.database import utc_now
from roster.repositories.schedule_repository import schedule_repository
from roster.services.approval_service import APPROVAL_TRANSITION, next_deadline
from roster.services.notification_service import notification_service
from roster.utils.event_log import log_event

logger = logging.getLogger(__name__)

# 검토 상태 → 단계 — Review status to the stage it belongs to
STATUS_STAGE: dict[str, str] = {
    STATUS_REVIEW_1: STAGE_SUPERVISOR,
    STATUS_REVIEW_2: STAGE_AREA_MANAGER,
}


async def run_sla_sweep(db: AsyncSession, now: datetime | None = None) -> list[str]:
    """SLA 마감이 지난 스케줄을 자동 승인합니다.

    Advance every schedule in a review status whose deadline is before
    ``now``: review_stage_1 → review_stage_2 (deadline now + SLA_HOURS,
    new pending area_manager review) and review_stage_2 → published
    (deadline cleared). The timed-out stage's pending review is marked
    approved by "sla-timeout". Commits after each schedule; a schedule that
    fails is rolled back and logged, and the sweep moves on to the next one.

    A second sweep at the same ``now`` advances nothing.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        now: 기준 시각, 기본값 현재 (Reference time; defaults to now)

    Returns:
        list[str]: 전이된 스케줄 ID 목록 (Ids of schedules advanced by this call)
    """
    now = now or utc_now()
    advanced: list[str] = []

    overdue = [(s.id, s.status, s.sla_deadline_at) for s in await schedule_repository.list_overdue(db, now)]
    for schedule_id, status, deadline in overdue:
        stage = STATUS_STAGE[status]
        source, target = APPROVAL_TRANSITION[stage]
        try:
            moved = await _advance(db, schedule_id, stage, source, target, deadline, now)
        except Exception:
            await db.rollback()
            logger.exception("SLA sweep failed for schedule %s; continuing", schedule_id)
            continue
        if not moved:
            logger.info("SLA sweep skipped schedule %s: status changed concurrently", schedule_id)
            continue

        advanced.append(str(schedule_id))
        log_event(
            "sla.auto_approved",
            schedule_id=schedule_id,
            from_status=source,
            to_status=target,
            expired_deadline=deadline,
            swept_at=now,
        )

    if advanced:
        logger.info("SLA sweep advanced %d schedule(s)", len(advanced))
    return advanced


async def _advance(
    db: AsyncSession,
    schedule_id: UUID,
    stage: str,
    source: str,
    target: str,
    deadline: datetime,
    now: datetime,
) -> bool:
    """스케줄 1건 자동 승인 후 커밋 — False when another writer moved it first."""
    if not await schedule_repository.set_status_and_deadline(
        db, schedule_id, source, target, next_deadline(target, now), expected_deadline=deadline
    ):
        return False

    review = await schedule_repository.get_pending_review(db, schedule_id, stage)
    if review is not None:
        await schedule_repository.decide_review(
            db, review.id, REVIEW_APPROVED, SLA_TIMEOUT_ACTOR, now, comment="Approved on SLA timeout"
        )

    schedule = await schedule_repository.get_by_id(db, schedule_id)
    if target == STATUS_REVIEW_2:
        await schedule_repository.create_review(db, {
            "schedule_id": schedule_id,
            "stage": STAGE_AREA_MANAGER,
            "status": REVIEW_PENDING,
        })
    await notification_service.create_for_sla(db, schedule, stage)
    if target == STATUS_PUBLISHED:
        await notification_service.create_for_publish(db, schedule)

    await db.commit()
    return True


class SlaSweepRunner:
    """주기적 SLA 스윕 실행기.

    Background task that runs the sweep every ``interval_seconds`` with a
    fresh session per iteration. A failed iteration is logged and the loop
    keeps going.

    Usage:
        runner = SlaSweepRunner(async_session, 3600)
        runner.start()
        ...
        await runner.stop()
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], interval_seconds: float) -> None:
        self._session_factory = session_factory
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="sla-sweep")
        logger.info("SLA sweep runner started (every %ss)", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("SLA sweep runner stopped")

    async def run_once(self) -> list[str]:
        async with self._session_factory() as db:
            return await run_sla_sweep(db, utc_now())

    async def _loop(self) -> None:
        while True:
            try:
                await self.run_once()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("SLA sweep iteration failed")
            await asyncio.sleep(self._interval)
