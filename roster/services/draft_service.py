"""초안 생성 서비스 — 자동 배정 결과를 저장하고 검증합니다.

Draft Service — Runs the auto-assignment heuristic for a draft schedule,
replaces the store-week's slots and assignments with the result, and
returns the draft together with its week validation.
"""

import logging
from datetime import timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from roster.constants import STATUS_DRAFT
from roster.repositories.schedule_repository import schedule_repository, shift_slot_repository
from roster.repositories.worker_repository import time_off_repository
from roster.schemas.schedule import WeekSnapshot
from roster.services.auto_assign import generate_draft
from roster.services.labor_policy_service import labor_policy_service
from roster.services.rules_engine import RulesEngine
from roster.services.schedule_service import schedule_service
from roster.services.worker_service import worker_service
from roster.utils.event_log import log_event
from roster.utils.exceptions import BadRequestError, ConflictError

logger = logging.getLogger(__name__)


class DraftService:
    """초안 생성 서비스 — Draft generation service."""

    async def generate(self, db: AsyncSession, schedule_id: UUID) -> dict:
        """스케줄 초안을 자동 생성합니다.

        Generate (or regenerate) the draft for a schedule. Existing slots
        and assignments of the store-week are replaced, never merged. The
        schedule row is claimed with a conditional update first, so a
        concurrent submit cannot move it out of draft mid-regeneration.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            schedule_id: 스케줄 UUID (Schedule UUID)

        Returns:
            dict: DraftResult 응답 (Counts, advisory warnings, validation result)

        Raises:
            NotFoundError: 스케줄이 없을 때 (When schedule not found)
            BadRequestError: draft 상태가 아닐 때 (When not in draft status)
            ConflictError: 생성 중 상태가 바뀌었을 때 (When the status changed concurrently)
        """
        schedule = await schedule_service.get_schedule(db, schedule_id)
        if schedule.status != STATUS_DRAFT:
            raise BadRequestError(
                "초안 상태의 스케줄만 자동 배정할 수 있습니다 (Only draft schedules can be regenerated)"
            )
        if not await schedule_repository.set_status_and_deadline(
            db, schedule.id, STATUS_DRAFT, STATUS_DRAFT, None
        ):
            logger.info("Draft generation for schedule %s lost a concurrent transition", schedule.id)
            raise ConflictError("스케줄 상태가 변경되었습니다 (Schedule status changed concurrently)")

        config = await labor_policy_service.get_config(db, schedule.store_id)
        workers = await worker_service.list_profiles(db, schedule.store_id)
        week_end = schedule.week_start + timedelta(days=6)
        time_off = await time_off_repository.list_approved_time_off(
            db, schedule.store_id, schedule.week_start, week_end
        )

        plan = generate_draft(workers, schedule.week_start, time_off=time_off, config=config)

        slots, assignments = await shift_slot_repository.replace_week(
            db,
            schedule.id,
            schedule.store_id,
            schedule.week_start,
            slots=[slot.model_dump() for slot in plan.slots],
            assignments=[
                {**item.model_dump(), "worker_id": UUID(item.worker_id)}
                for item in plan.assignments
            ],
        )

        validation = RulesEngine(config).validate_week(
            WeekSnapshot(
                week_start=schedule.week_start,
                workers=workers,
                slots=plan.slots,
                assignments=plan.assignments,
            )
        )

        log_event(
            "schedule.draft_generated",
            schedule_id=schedule.id,
            store_id=schedule.store_id,
            week_start=schedule.week_start,
            slots=len(slots),
            assignments=len(assignments),
            violations=len(validation.violations),
        )

        return {
            "schedule_id": str(schedule.id),
            "week_start": schedule.week_start,
            "shift_slots_created": len(slots),
            "assignments_created": len(assignments),
            "warnings": plan.warnings,
            "validation": validation,
        }


# 싱글턴 인스턴스 — Singleton instance
draft_service: DraftService = DraftService()
