"""자동 배정 휴리스틱 테스트.

Auto-assignment tests — slot materialization, eligibility filtering,
the deterministic tie-break, and advisory warnings.
"""

from datetime import date, time, timedelta

from roster.schemas.roster import WorkerProfile
from roster.schemas.schedule import WeekSnapshot
from roster.services.auto_assign import DRAFT_NOTICE, build_week_slots, generate_draft
from roster.services.rules_engine import RulesEngine

MONDAY = date(2025, 1, 13)


def worker(worker_id: str, role: str, skills: list[str], category: str = "full_time", pt_shift_type=None):
    return WorkerProfile(
        id=worker_id,
        name=worker_id.upper(),
        category=category,
        primary_role=role,
        skills=skills,
        pt_shift_type=pt_shift_type,
    )


def six_workers() -> list[WorkerProfile]:
    return [
        worker("w1", "cashier", ["cashier", "reception"]),
        worker("w2", "reception", ["reception", "cashier"]),
        worker("w3", "plating", ["plating", "runner"], "part_time", "full_day"),
        worker("w4", "clearing", ["clearing", "beverage"], "part_time", "weekday_evening_only"),
        worker("w5", "control", ["control", "tea_service"]),
        worker("w6", "runner", ["runner", "beverage"], "part_time", "weekend_evening_only"),
    ]


class TestSlots:
    """슬롯 생성 테스트."""

    def test_fourteen_slots_monday_to_sunday(self):
        slots = build_week_slots(MONDAY, {"cashier": 1})
        assert len(slots) == 14
        assert [(s.work_date, s.period) for s in slots[:3]] == [
            (MONDAY, "AM"), (MONDAY, "PM"), (MONDAY + timedelta(days=1), "AM"),
        ]
        assert slots[-1].work_date == MONDAY + timedelta(days=6)
        assert all(s.min_staffing == {"cashier": 1} for s in slots)

    def test_default_template_is_config_minimums(self):
        plan = generate_draft([], MONDAY)
        assert len(plan.slots) == 14
        assert len(plan.slots[0].min_staffing) == 8
        assert plan.assignments == []


class TestGenerateDraft:
    """초안 생성 테스트."""

    def test_no_duplicate_worker_in_a_slot(self):
        plan = generate_draft(six_workers(), MONDAY)
        keys = [(a.worker_id, a.work_date, a.period) for a in plan.assignments]
        assert plan.assignments
        assert len(keys) == len(set(keys))

    def test_weekday_evening_worker_never_on_weekend(self):
        plan = generate_draft(six_workers(), MONDAY)
        w4 = [a for a in plan.assignments if a.worker_id == "w4"]
        assert w4
        assert all(a.work_date.weekday() < 5 and a.period == "PM" for a in w4)

    def test_only_listed_skills_are_drafted(self):
        workers = six_workers() + [worker("w7", "cashier", [])]
        plan = generate_draft(workers, MONDAY)
        assert all(a.worker_id != "w7" for a in plan.assignments)
        profiles = {w.id: w for w in workers}
        assert all(a.role in profiles[a.worker_id].skills for a in plan.assignments)

    def test_tie_break_by_load_then_id(self):
        workers = [worker("b", "cashier", ["cashier"]), worker("a", "cashier", ["cashier"])]
        plan = generate_draft(workers, MONDAY, staffing_template={"cashier": 1})
        assert [a.worker_id for a in plan.assignments[:4]] == ["a", "b", "a", "b"]

    def test_primary_role_preferred_on_equal_load(self):
        workers = [worker("a", "reception", ["cashier", "reception"]), worker("b", "cashier", ["cashier"])]
        plan = generate_draft(workers, MONDAY, staffing_template={"cashier": 1})
        assert plan.assignments[0].worker_id == "b"

    def test_time_off_excludes_worker(self):
        workers = [worker("a", "cashier", ["cashier"]), worker("b", "cashier", ["cashier"])]
        plan = generate_draft(workers, MONDAY, staffing_template={"cashier": 1}, time_off={("a", MONDAY)})
        monday = [a.worker_id for a in plan.assignments if a.work_date == MONDAY]
        assert monday == ["b", "b"]

    def test_default_hours_and_derived_fields(self):
        plan = generate_draft([worker("a", "cashier", ["cashier"])], MONDAY, staffing_template={"cashier": 1})
        first, second = plan.assignments[0], plan.assignments[1]
        assert (first.start_time, first.end_time) == (time(9, 0), time(17, 0))
        assert (second.start_time, second.end_time) == (time(17, 0), time(1, 0))
        assert first.break_minutes == 120
        assert first.regular_hours == 6
        assert first.overtime_hours == 0
        assert first.consecutive_days == 7

    def test_unfilled_roles_are_advisory(self):
        plan = generate_draft(six_workers(), MONDAY, staffing_template={"beverage": 1, "cashier": 1})
        assert plan.warnings[0].code == "draft_generated"
        assert plan.warnings[0].message == DRAFT_NOTICE
        unfilled = {w.role: w.details["unfilled"] for w in plan.warnings if w.code == "unfilled_role"}
        # 음료는 w4(평일 저녁), w6(주말 저녁)만 가능 (only evenings are covered)
        assert unfilled == {"beverage": 7}

    def test_deterministic(self):
        first = generate_draft(six_workers(), MONDAY)
        second = generate_draft(six_workers(), MONDAY)
        assert first.model_dump() == second.model_dump()

    def test_week_with_missing_skill_reports_shortfall(self):
        workers = [w for w in six_workers() if "beverage" not in w.skills]
        plan = generate_draft(workers, MONDAY)
        result = RulesEngine().validate_week(WeekSnapshot(
            week_start=MONDAY, workers=workers, slots=plan.slots, assignments=plan.assignments,
        ))
        beverage = [v for v in result.violations if v.code == "staffing_shortfall" and v.role == "beverage"]
        assert len(beverage) == 14
