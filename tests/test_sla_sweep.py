"""SLA 스윕 테스트 — 마감 초과 자동 승인, 멱등성, 사람 결정 우선.

SLA sweep tests — timeout advancement of both review stages, idempotence
at the same instant, human decisions winning over the sweep, the manual
trigger endpoint, and the background runner.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from roster.models.schedule import Schedule
from roster.repositories.schedule_repository import schedule_repository
from roster.services.approval_service import approval_service
from roster.services.sla_sweep_service import SlaSweepRunner, run_sla_sweep

T0 = datetime(2025, 1, 10, 9, 0, tzinfo=timezone.utc)
DAY = timedelta(hours=24)


class TestSweep:
    """SLA 스윕 서비스 테스트."""

    async def test_before_deadline_does_nothing(self, db, schedule):
        await approval_service.submit(db, schedule.id, "supervisor", now=T0)
        assert await run_sla_sweep(db, T0 + timedelta(hours=1)) == []
        assert schedule.status == "review_stage_1"

    async def test_stage_one_timeout(self, db, schedule):
        await approval_service.submit(db, schedule.id, "supervisor", now=T0)
        now = T0 + DAY + timedelta(hours=1)

        advanced = await run_sla_sweep(db, now)
        assert advanced == [str(schedule.id)]
        assert schedule.status == "review_stage_2"
        assert schedule.sla_deadline_at == now + DAY

        reviews = await schedule_repository.list_reviews(db, schedule.id)
        assert [(r.stage, r.status, r.decided_by) for r in reviews] == [
            ("supervisor", "approved", "sla-timeout"),
            ("area_manager", "pending", None),
        ]

        # 같은 시각 재실행은 전이 없음 — same instant, nothing further
        assert await run_sla_sweep(db, now) == []
        assert schedule.status == "review_stage_2"

    async def test_stage_two_timeout_publishes(self, db, schedule):
        await approval_service.submit(db, schedule.id, "supervisor", now=T0)
        first = T0 + DAY + timedelta(minutes=1)
        await run_sla_sweep(db, first)

        second = first + DAY + timedelta(minutes=1)
        assert await run_sla_sweep(db, second) == [str(schedule.id)]
        assert schedule.status == "published"
        assert schedule.sla_deadline_at is None

        area = await schedule_repository.list_reviews(db, schedule.id)
        assert area[-1].stage == "area_manager"
        assert area[-1].status == "approved"

    async def test_human_decision_wins(self, db, schedule):
        await approval_service.submit(db, schedule.id, "supervisor", now=T0)
        review = await schedule_repository.get_pending_review(db, schedule.id, "supervisor")
        await approval_service.decide(db, review.id, "approved", "mgr-1", now=T0 + timedelta(hours=2))

        # 원래 마감은 지났지만 새 마감 전 — past the old deadline, before the new one
        assert await run_sla_sweep(db, T0 + DAY + timedelta(hours=1)) == []
        assert schedule.status == "review_stage_2"

    async def test_sweep_skips_changed_deadline(self, db, schedule):
        await approval_service.submit(db, schedule.id, "supervisor", now=T0)
        moved = await schedule_repository.set_status_and_deadline(
            db, schedule.id, "review_stage_1", "review_stage_2", None,
            expected_deadline=T0 + timedelta(hours=1),
        )
        assert moved is False

    async def test_draft_and_published_untouched(self, db, store, schedule):
        published = Schedule(store_id=store.id, week_start=schedule.week_start + timedelta(days=7), status="published")
        db.add(published)
        await db.flush()
        assert await run_sla_sweep(db, T0 + 10 * DAY) == []

    async def test_failing_schedule_does_not_stop_the_sweep(self, db, store, schedule, monkeypatch, caplog):
        """한 건 실패 시 롤백 후 나머지 스케줄은 계속 처리."""
        from roster.services.notification_service import notification_service

        other = Schedule(store_id=store.id, week_start=schedule.week_start + timedelta(days=7), status="draft")
        db.add(other)
        await db.flush()
        await approval_service.submit(db, schedule.id, "supervisor", now=T0)
        await approval_service.submit(db, other.id, "supervisor", now=T0)
        await db.commit()
        broken_id, other_id = schedule.id, other.id

        real_create_for_sla = notification_service.create_for_sla

        async def failing_create_for_sla(session, target, stage):
            if target.id == broken_id:
                raise RuntimeError("notification store unavailable")
            return await real_create_for_sla(session, target, stage)

        monkeypatch.setattr(notification_service, "create_for_sla", failing_create_for_sla)

        with caplog.at_level(logging.ERROR, logger="roster.services.sla_sweep_service"):
            advanced = await run_sla_sweep(db, T0 + 2 * DAY)

        assert advanced == [str(other_id)]
        assert "SLA sweep failed for schedule" in caplog.text

        broken = await db.get(Schedule, broken_id, populate_existing=True)
        assert broken.status == "review_stage_1"
        assert await schedule_repository.get_pending_review(db, broken_id, "supervisor") is not None

        moved = await db.get(Schedule, other_id, populate_existing=True)
        assert moved.status == "review_stage_2"

    async def test_sla_notification(self, db, store, schedule):
        from roster.services.notification_service import notification_service

        await approval_service.submit(db, schedule.id, "supervisor", now=T0)
        await run_sla_sweep(db, T0 + 2 * DAY)
        items, _ = await notification_service.list_for_store(db, store.id)
        assert "sla_auto_approved" in {n.type for n in items}


class TestSweepApi:
    """수동 SLA 스윕 API 테스트."""

    async def test_manual_trigger(self, client: AsyncClient, db, schedule):
        await approval_service.submit(db, schedule.id, "supervisor", now=T0)
        await db.commit()

        early = await client.post("/api/v1/admin/sla-sweep", json={"now": T0.isoformat()})
        assert early.json() == {"advanced": [], "count": 0}

        res = await client.post("/api/v1/admin/sla-sweep", json={"now": (T0 + 2 * DAY).isoformat()})
        assert res.status_code == 200
        assert res.json() == {"advanced": [str(schedule.id)], "count": 1}


class TestRunner:
    """백그라운드 실행기 테스트."""

    async def test_run_once_uses_fresh_session(self, engine, db, schedule):
        past = datetime.now(timezone.utc) - 3 * DAY
        await approval_service.submit(db, schedule.id, "supervisor", now=past)
        await db.commit()

        runner = SlaSweepRunner(async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False), 3600)
        assert await runner.run_once() == [str(schedule.id)]

        await db.refresh(schedule)
        assert schedule.status == "review_stage_2"

    async def test_failed_iteration_keeps_running(self, caplog):
        def broken_factory():
            raise RuntimeError("database unavailable")

        runner = SlaSweepRunner(broken_factory, 3600)
        with caplog.at_level(logging.ERROR, logger="roster.services.sla_sweep_service"):
            runner.start()
            await asyncio.sleep(0)
            await asyncio.sleep(0)
            assert runner.running is True
            assert "SLA sweep iteration failed" in caplog.text

        await runner.stop()
        assert runner.running is False
