"""스케줄 서비스 — 주간 스케줄 생성/조회/검증.

Schedule Service — Weekly schedule creation, lookup, detail views, and
validation. Loads the store-week from the database into a WeekSnapshot
and hands it to the pure rules engine.
"""

from collections import defaultdict
from datetime import timedelta
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from roster.models.schedule import Assignment, Schedule, ShiftSlot
from roster.repositories.schedule_repository import schedule_repository, shift_slot_repository
from roster.repositories.worker_repository import worker_repository
from roster.schemas.rules import RulesConfig, ValidationResult
from roster.schemas.schedule import (
    AssignmentSnapshot,
    ProposedAssignment,
    ScheduleCreate,
    SlotSnapshot,
    WeekSnapshot,
)
from roster.services.labor_policy_service import labor_policy_service
from roster.services.rules_engine import CONSECUTIVE_SCAN_DAYS, RulesEngine
from roster.services.store_service import store_service
from roster.services.worker_service import to_profile, worker_service
from roster.utils.exceptions import BadRequestError, DuplicateError, NotFoundError
from roster.utils.work_hours import format_clock, is_peak


def _snapshot(assignment: Assignment, slot: ShiftSlot) -> AssignmentSnapshot:
    return AssignmentSnapshot(
        worker_id=str(assignment.worker_id),
        work_date=slot.work_date,
        period=slot.period,
        role=assignment.role,
        start_time=assignment.start_time,
        end_time=assignment.end_time,
        break_minutes=assignment.break_minutes,
    )


class ScheduleService:
    """스케줄 서비스.

    Schedule service handling creation, detail responses, and
    rules-engine validation of stored weeks.
    """

    async def create_schedule(self, db: AsyncSession, data: ScheduleCreate) -> Schedule:
        """빈 주간 스케줄을 생성합니다 (status=draft).

        Create an empty draft schedule for a store-week.

        Raises:
            NotFoundError: 매장이 없을 때 (When store not found)
            DuplicateError: 같은 주 스케줄이 이미 있을 때 (When the store-week already has one)
        """
        await store_service.get_store(db, data.store_id)
        if await schedule_repository.get_by_store_week(db, data.store_id, data.week_start) is not None:
            raise DuplicateError(
                "해당 주의 스케줄이 이미 존재합니다 (A schedule already exists for this store and week)"
            )
        return await schedule_repository.create(db, data.model_dump())

    async def get_schedule(self, db: AsyncSession, schedule_id: UUID) -> Schedule:
        schedule = await schedule_repository.get_by_id(db, schedule_id)
        if schedule is None:
            raise NotFoundError("스케줄을 찾을 수 없습니다 (Schedule not found)")
        return schedule

    async def list_schedules(
        self,
        db: AsyncSession,
        store_id: UUID | None = None,
        status: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Schedule], int]:
        return await schedule_repository.get_by_filters(db, store_id, status, page, per_page)

    # --- 검증 (Validation) ---

    async def load_week(self, db: AsyncSession, schedule: Schedule) -> WeekSnapshot:
        """저장된 주간 스케줄을 스냅샷으로 로드합니다.

        Load the schedule's slots and assignments plus the store's workers
        (inactive ones included, so past assignments keep their category).
        """
        slots = await shift_slot_repository.list_slots(db, schedule.id)
        slots_by_id = {slot.id: slot for slot in slots}
        assignments = await shift_slot_repository.list_assignments(db, schedule.id)
        workers = await worker_repository.list_by_store(db, schedule.store_id, active_only=False)

        return WeekSnapshot(
            week_start=schedule.week_start,
            workers=[to_profile(w) for w in workers],
            slots=[
                SlotSnapshot(work_date=s.work_date, period=s.period, min_staffing=dict(s.min_staffing or {}))
                for s in slots
            ],
            assignments=[_snapshot(a, slots_by_id[a.slot_id]) for a in assignments],
        )

    async def validate_schedule(
        self,
        db: AsyncSession,
        schedule: Schedule,
        config: RulesConfig | None = None,
    ) -> ValidationResult:
        """주간 검증 — validate_week over the stored schedule."""
        if config is None:
            config = await labor_policy_service.get_config(db, schedule.store_id)
        week = await self.load_week(db, schedule)
        return RulesEngine(config).validate_week(week)

    async def validate_proposed(
        self,
        db: AsyncSession,
        schedule_id: UUID,
        proposal: ProposedAssignment,
    ) -> ValidationResult:
        """제안된 배정 1건을 검증합니다.

        Validate a proposed assignment against the worker's assignments in
        the surrounding ±7 days, across schedules of the same store.

        Raises:
            NotFoundError: 스케줄/근무자가 없을 때 (When schedule or worker not found)
            BadRequestError: 주 범위 밖 날짜이거나 다른 매장 근무자일 때
                             (Date outside the week, or worker from another store)
        """
        schedule = await self.get_schedule(db, schedule_id)
        week_end = schedule.week_start + timedelta(days=6)
        if not schedule.week_start <= proposal.work_date <= week_end:
            raise BadRequestError("주 범위 밖의 날짜입니다 (work_date is outside the schedule week)")

        worker = await worker_service.get_worker(db, proposal.worker_id)
        if worker.store_id != schedule.store_id:
            raise BadRequestError("다른 매장의 근무자입니다 (Worker belongs to another store)")

        rows = await shift_slot_repository.list_worker_assignments(
            db,
            worker.id,
            proposal.work_date - timedelta(days=CONSECUTIVE_SCAN_DAYS),
            proposal.work_date + timedelta(days=CONSECUTIVE_SCAN_DAYS),
        )
        existing = [_snapshot(a, slot) for a, slot in rows if slot.store_id == schedule.store_id]

        config = await labor_policy_service.get_config(db, schedule.store_id)
        target = AssignmentSnapshot(**{**proposal.model_dump(), "worker_id": str(proposal.worker_id)})
        return RulesEngine(config).validate_assignment(target, to_profile(worker), existing)

    # --- 응답 구성 (Responses) ---

    def build_response(self, schedule: Schedule) -> dict:
        return {
            "id": str(schedule.id),
            "store_id": str(schedule.store_id),
            "week_start": schedule.week_start,
            "status": schedule.status,
            "sla_deadline_at": schedule.sla_deadline_at,
            "created_by": schedule.created_by,
            "created_at": schedule.created_at,
        }

    async def build_detail(self, db: AsyncSession, schedule: Schedule) -> dict:
        """스케줄 상세 응답 구성.

        Build the detail response: slots, assignments with their derived
        hours and peak flag, and weekly worked hours per worker.
        """
        config = await labor_policy_service.get_config(db, schedule.store_id)
        slots = await shift_slot_repository.list_slots(db, schedule.id)
        slots_by_id = {slot.id: slot for slot in slots}
        assignments = await shift_slot_repository.list_assignments(db, schedule.id)
        workers = {w.id: w for w in await worker_repository.list_by_store(db, schedule.store_id, active_only=False)}
        engine = RulesEngine(config)

        weekly_hours: dict[str, float] = defaultdict(float)
        items: list[dict] = []
        for a in assignments:
            slot = slots_by_id[a.slot_id]
            worker = workers.get(a.worker_id)
            hours = engine.hours_for(_snapshot(a, slot), to_profile(worker) if worker else None)
            weekly_hours[str(a.worker_id)] += hours.total_hours
            items.append({
                "id": str(a.id),
                "slot_id": str(a.slot_id),
                "worker_id": str(a.worker_id),
                "worker_name": worker.name if worker else None,
                "work_date": slot.work_date,
                "period": slot.period,
                "role": a.role,
                "start_time": format_clock(a.start_time),
                "end_time": format_clock(a.end_time),
                "break_minutes": a.break_minutes,
                "regular_hours": a.regular_hours,
                "overtime_hours": a.overtime_hours,
                "consecutive_days": a.consecutive_days,
                "is_peak": is_peak(a.start_time, a.end_time, config.meal_periods),
            })

        return {
            **self.build_response(schedule),
            "slots": [
                {
                    "id": str(s.id),
                    "work_date": s.work_date,
                    "period": s.period,
                    "min_staffing": dict(s.min_staffing or {}),
                }
                for s in slots
            ],
            "assignments": items,
            "weekly_hours": dict(weekly_hours),
        }


# 싱글턴 인스턴스 — Singleton instance
schedule_service: ScheduleService = ScheduleService()
