"""자동 배정 휴리스틱 — 우선순위 기반 그리디 배정.

Auto-assignment heuristic. Builds the 14 half-day slots of a week and
fills each slot independently with a priority-ordered greedy pass. This is
a best-effort cover, not a solver: there is no backtracking and no global
balancing of hours.

Candidate order for a (slot, role) cell:
    1. 이번 초안에서 배정 횟수가 적은 순 (fewest assignments so far in this draft)
    2. 주 역할이 해당 역할인 근무자 우선 (primary role equal to the role first)
    3. 근무자 ID 문자열 오름차순 (ascending worker id string)
"""

import logging
from collections import Counter
from collections.abc import Collection, Mapping, Sequence
from datetime import date, timedelta

from roster.constants import ALL_SKILLS, PERIODS
from roster.schemas.roster import WorkerProfile
from roster.schemas.rules import RulesConfig, ValidationIssue
from roster.schemas.schedule import DraftPlan, PlannedAssignment, SlotSnapshot
from roster.services.rules_engine import RulesEngine, role_order, run_length_through

logger = logging.getLogger(__name__)

DRAFT_NOTICE: str = "Draft generated automatically; review before publishing"
DAYS_PER_WEEK: int = 7


def can_fill(worker: WorkerProfile, role: str) -> bool:
    """초안 배정용 스킬 판정 — the role (or "all") must be listed explicitly."""
    return ALL_SKILLS in worker.skills or role in worker.skills


def build_week_slots(week_start: date, staffing_template: Mapping[str, int]) -> list[SlotSnapshot]:
    """월~일 x 오전/오후 14개 슬롯 생성 — Mon..Sun x AM, PM."""
    return [
        SlotSnapshot(
            work_date=week_start + timedelta(days=offset),
            period=period,
            min_staffing=dict(staffing_template),
        )
        for offset in range(DAYS_PER_WEEK)
        for period in PERIODS
    ]


def generate_draft(
    workers: Sequence[WorkerProfile],
    week_start: date,
    staffing_template: Mapping[str, int] | None = None,
    time_off: Collection[tuple[str, date]] = (),
    config: RulesConfig | None = None,
) -> DraftPlan:
    """주간 초안 스케줄을 생성합니다.

    Generate a draft week for one store.

    Each slot walks the roles in priority order (roles outside the fixed
    list come last) and fills every role up to its minimum with eligible,
    skilled workers who are not already in the slot. Cells with no
    candidate are left short; an advisory warning counts them per role.

    Args:
        workers: 활성 근무자 스냅샷 (Active worker snapshots)
        week_start: 주 시작일 (Monday of the week)
        staffing_template: 역할별 최소 인원, 기본값은 설정값 (Per-role minimums; config default)
        time_off: 승인된 휴가 (worker_id, date) 쌍 (Approved time-off pairs)
        config: 노동 정책 스냅샷 (Labor policy snapshot)

    Returns:
        DraftPlan: 슬롯, 배정, 경고 (Slots, assignments, and advisory warnings)
    """
    engine = RulesEngine(config)
    cfg = engine.config
    template = dict(staffing_template if staffing_template is not None else cfg.min_staffing)
    slots = build_week_slots(week_start, template)

    time_off_set = set(time_off)
    load: Counter[str] = Counter()
    planned: list[PlannedAssignment] = []
    unfilled: Counter[str] = Counter()

    for slot in slots:
        window = cfg.period_hours[slot.period]
        in_slot: set[str] = set()

        for role in sorted(slot.min_staffing, key=role_order):
            for _ in range(slot.min_staffing[role]):
                candidates = [
                    worker for worker in workers
                    if worker.id not in in_slot
                    and can_fill(worker, role)
                    and engine.is_eligible(worker, slot.work_date, slot.period, time_off_set)
                ]
                if not candidates:
                    unfilled[role] += 1
                    continue

                chosen = min(
                    candidates,
                    key=lambda w: (load[w.id], w.primary_role != role, str(w.id)),
                )
                in_slot.add(chosen.id)
                load[chosen.id] += 1
                planned.append(PlannedAssignment(
                    worker_id=chosen.id,
                    work_date=slot.work_date,
                    period=slot.period,
                    role=role,
                    start_time=window.start,
                    end_time=window.end,
                    break_minutes=cfg.default_break_minutes,
                ))

    workers_by_id = {worker.id: worker for worker in workers}
    dates_by_worker: dict[str, set[date]] = {}
    for item in planned:
        dates_by_worker.setdefault(item.worker_id, set()).add(item.work_date)

    assignments: list[PlannedAssignment] = []
    for item in planned:
        hours = engine.hours_for(item, workers_by_id.get(item.worker_id))
        assignments.append(item.model_copy(update={
            "regular_hours": hours.regular_hours,
            "overtime_hours": hours.overtime_hours,
            "consecutive_days": run_length_through(item.work_date, dates_by_worker[item.worker_id]),
        }))

    warnings = [ValidationIssue(code="draft_generated", message=DRAFT_NOTICE)]
    for role in sorted(unfilled, key=role_order):
        warnings.append(ValidationIssue(
            code="unfilled_role",
            message=f"{unfilled[role]} {role} position(s) could not be filled",
            role=role,
            details={"unfilled": unfilled[role]},
        ))

    logger.debug(
        "Draft for week %s: %d slots, %d assignments, %d unfilled",
        week_start, len(slots), len(assignments), sum(unfilled.values()),
    )
    return DraftPlan(slots=slots, assignments=assignments, warnings=warnings)
