"""규칙 엔진 테스트.

Rules engine tests — single-assignment checks, week checks, and the
availability predicate. Pure functions; no database.
"""

from datetime import date, time, timedelta

from roster.constants import ROLE_PRIORITY
from roster.schemas.roster import WorkerProfile
from roster.schemas.rules import RulesConfig, WorkLimit
from roster.schemas.schedule import AssignmentSnapshot, SlotSnapshot, WeekSnapshot
from roster.services.rules_engine import RulesEngine, maximal_runs, run_length_through

MONDAY = date(2025, 1, 13)
SATURDAY = date(2025, 1, 18)


def make_worker(worker_id: str = "w1", category: str = "full_time", skills=None, pt_shift_type=None, role="cashier"):
    return WorkerProfile(
        id=worker_id,
        name=f"Worker {worker_id}",
        category=category,
        primary_role=role,
        skills=skills if skills is not None else [role],
        pt_shift_type=pt_shift_type,
    )


def make_assignment(
    worker_id: str = "w1",
    work_date: date = MONDAY,
    period: str = "AM",
    role: str = "cashier",
    start: time = time(9, 0),
    end: time = time(17, 0),
    break_minutes: int = 120,
):
    return AssignmentSnapshot(
        worker_id=worker_id,
        work_date=work_date,
        period=period,
        role=role,
        start_time=start,
        end_time=end,
        break_minutes=break_minutes,
    )


def codes(issues) -> list[str]:
    return [issue.code for issue in issues]


class TestValidateAssignment:
    """배정 1건 검증 테스트."""

    def test_clean_assignment(self):
        result = RulesEngine().validate_assignment(make_assignment(), make_worker())
        assert result.valid is True
        assert result.violations == []
        assert result.warnings == []

    def test_full_time_thirteen_hours_is_one_daily_violation(self):
        """정규직 13시간 → 일일 한도 위반 정확히 1건."""
        assignment = make_assignment(start=time(8, 0), end=time(22, 0), break_minutes=60)
        result = RulesEngine().validate_assignment(assignment, make_worker())
        assert result.valid is False
        assert codes(result.violations) == ["daily_hours_exceeded"]
        assert result.violations[0].details["hours"] == 13

    def test_part_time_daily_limit_counts_same_date(self):
        """파트타임: 같은 날 오전+오후 12시간 > 10시간."""
        worker = make_worker(category="part_time", pt_shift_type="full_day")
        existing = [make_assignment(period="AM")]
        target = make_assignment(period="PM", start=time(17, 0), end=time(1, 0))
        result = RulesEngine().validate_assignment(target, worker, existing)
        assert codes(result.violations) == ["daily_hours_exceeded"]

    def test_full_time_two_blocks_same_day_within_limit(self):
        existing = [make_assignment(period="AM")]
        target = make_assignment(period="PM", start=time(17, 0), end=time(1, 0))
        result = RulesEngine().validate_assignment(target, make_worker(), existing)
        assert result.valid is True

    def test_same_date_period_existing_is_the_target_itself(self):
        existing = [make_assignment(start=time(8, 0), end=time(22, 0), break_minutes=60)]
        result = RulesEngine().validate_assignment(make_assignment(), make_worker(), existing)
        assert result.valid is True

    def test_consecutive_days_over_limit(self):
        """월~금 근무 후 토요일 배정 → 6일 연속 > 5."""
        existing = [make_assignment(work_date=MONDAY + timedelta(days=i)) for i in range(5)]
        result = RulesEngine().validate_assignment(make_assignment(work_date=SATURDAY), make_worker(), existing)
        assert codes(result.violations) == ["consecutive_days_exceeded"]
        assert result.violations[0].details["days"] == 6

    def test_consecutive_days_reaching_limit_is_violation(self):
        """월~목 근무 후 금요일 배정 → 5일 연속 = 한도 5."""
        existing = [make_assignment(work_date=MONDAY + timedelta(days=i)) for i in range(4)]
        target = make_assignment(work_date=MONDAY + timedelta(days=4))
        result = RulesEngine().validate_assignment(target, make_worker(), existing)
        assert codes(result.violations) == ["consecutive_days_exceeded"]
        assert result.violations[0].details == {"days": 5, "limit": 5}

    def test_consecutive_days_below_limit_is_allowed(self):
        existing = [make_assignment(work_date=MONDAY + timedelta(days=i)) for i in range(3)]
        target = make_assignment(work_date=MONDAY + timedelta(days=3))
        assert RulesEngine().validate_assignment(target, make_worker(), existing).valid is True

    def test_part_time_consecutive_limit_is_six(self):
        worker = make_worker(category="part_time", pt_shift_type="full_day")
        engine = RulesEngine()
        existing = [make_assignment(work_date=MONDAY + timedelta(days=i)) for i in range(4)]
        friday = make_assignment(work_date=MONDAY + timedelta(days=4))
        assert engine.validate_assignment(friday, worker, existing).valid is True

        existing.append(friday)
        result = engine.validate_assignment(make_assignment(work_date=SATURDAY), worker, existing)
        assert codes(result.violations) == ["consecutive_days_exceeded"]
        assert result.violations[0].details["days"] == 6

    def test_run_bridges_both_sides_of_target(self):
        """대상일 앞뒤 근무가 이어지는 경우."""
        existing = [
            make_assignment(work_date=MONDAY + timedelta(days=offset))
            for offset in (0, 1, 2, 4, 5)
        ]
        target = make_assignment(work_date=MONDAY + timedelta(days=3))
        result = RulesEngine().validate_assignment(target, make_worker(), existing)
        assert result.violations[0].details["days"] == 6

    def test_break_below_minimum_is_violation(self):
        result = RulesEngine().validate_assignment(make_assignment(break_minutes=20), make_worker())
        assert codes(result.violations) == ["break_below_minimum"]
        assert "break_below_standard" not in codes(result.warnings)

    def test_break_below_standard_is_warning_with_shortfall(self):
        result = RulesEngine().validate_assignment(make_assignment(break_minutes=90), make_worker())
        assert result.valid is True
        assert codes(result.warnings) == ["break_below_standard"]
        assert result.warnings[0].details["shortfall_minutes"] == 30

    def test_skill_mismatch_is_warning(self):
        worker = make_worker(skills=["plating"], role="plating")
        result = RulesEngine().validate_assignment(make_assignment(role="cashier"), worker)
        assert result.valid is True
        assert codes(result.warnings) == ["skill_mismatch"]

    def test_no_skill_data_or_all_is_capable(self):
        engine = RulesEngine()
        assert engine.validate_assignment(make_assignment(role="beverage"), make_worker(skills=[])).warnings == []
        assert engine.validate_assignment(make_assignment(role="beverage"), make_worker(skills=["all"])).warnings == []

    def test_custom_config_limits(self):
        config = RulesConfig(work_limits={
            "full_time": WorkLimit(max_daily_hours=5, max_consecutive_days=5),
            "part_time": WorkLimit(max_daily_hours=5, max_consecutive_days=6),
        })
        result = RulesEngine(config).validate_assignment(make_assignment(), make_worker())
        assert codes(result.violations) == ["daily_hours_exceeded"]


class TestIsEligible:
    """가용성 판정 테스트."""

    def test_weekday_evening_only_is_barred_on_saturday_pm(self):
        worker = make_worker(category="part_time", pt_shift_type="weekday_evening_only")
        engine = RulesEngine()
        assert engine.is_eligible(worker, SATURDAY, "PM") is False
        assert engine.is_eligible(worker, MONDAY, "PM") is True
        assert engine.is_eligible(worker, MONDAY, "AM") is False

    def test_weekend_evening_only(self):
        worker = make_worker(category="part_time", pt_shift_type="weekend_evening_only")
        engine = RulesEngine()
        assert engine.is_eligible(worker, SATURDAY, "PM") is True
        assert engine.is_eligible(worker, SATURDAY, "AM") is False
        assert engine.is_eligible(worker, MONDAY, "PM") is False

    def test_full_day_and_full_time_unrestricted(self):
        engine = RulesEngine()
        full_day = make_worker(category="part_time", pt_shift_type="full_day")
        full_time = make_worker(pt_shift_type="weekday_evening_only")
        for worker in (full_day, full_time):
            assert engine.is_eligible(worker, SATURDAY, "AM") is True

    def test_unknown_or_missing_shift_type_is_unrestricted(self):
        engine = RulesEngine()
        assert engine.is_eligible(make_worker(category="part_time", pt_shift_type="night_owl"), SATURDAY, "AM")
        assert engine.is_eligible(make_worker(category="part_time"), SATURDAY, "AM")

    def test_approved_time_off_excludes(self):
        engine = RulesEngine()
        worker = make_worker()
        assert engine.is_eligible(worker, MONDAY, "AM", {("w1", MONDAY)}) is False
        assert engine.is_eligible(worker, MONDAY + timedelta(days=1), "AM", {("w1", MONDAY)}) is True


class TestValidateWeek:
    """주간 검증 테스트."""

    def _full_cover(self) -> WeekSnapshot:
        workers = [make_worker(f"w{i}", role=role) for i, role in enumerate(ROLE_PRIORITY)]
        assignments = [
            make_assignment(worker_id=f"w{i}", role=role)
            for i, role in enumerate(ROLE_PRIORITY)
        ]
        slot = SlotSnapshot(work_date=MONDAY, period="AM", min_staffing={role: 1 for role in ROLE_PRIORITY})
        return WeekSnapshot(week_start=MONDAY, workers=workers, slots=[slot], assignments=assignments)

    def test_full_coverage_has_no_staffing_violation(self):
        result = RulesEngine().validate_week(self._full_cover())
        assert result.valid is True
        assert result.violations == []

    def test_removing_one_assignment_gives_one_shortfall(self):
        week = self._full_cover()
        for index, removed in enumerate(week.assignments):
            rest = week.assignments[:index] + week.assignments[index + 1:]
            result = RulesEngine().validate_week(week.model_copy(update={"assignments": rest}))
            assert codes(result.violations) == ["staffing_shortfall"]
            assert result.violations[0].role == removed.role
            assert result.violations[0].work_date == MONDAY
            assert result.violations[0].period == "AM"

    def test_cells_derived_from_assignments_without_slots(self):
        week = WeekSnapshot(
            week_start=MONDAY,
            workers=[make_worker()],
            assignments=[make_assignment()],
        )
        result = RulesEngine().validate_week(week)
        shortfalls = [v for v in result.violations if v.code == "staffing_shortfall"]
        assert len(shortfalls) == len(ROLE_PRIORITY) - 1
        assert "cashier" not in {v.role for v in shortfalls}

    def test_empty_week_is_valid(self):
        assert RulesEngine().validate_week(WeekSnapshot(week_start=MONDAY)).valid is True

    def test_weekly_hours_and_run_over_limit(self):
        """7일 x 오전/오후 = 84시간, 7일 연속."""
        assignments = []
        for offset in range(7):
            day = MONDAY + timedelta(days=offset)
            assignments.append(make_assignment(work_date=day))
            assignments.append(make_assignment(work_date=day, period="PM", start=time(17, 0), end=time(1, 0)))
        week = WeekSnapshot(week_start=MONDAY, workers=[make_worker()], assignments=assignments)
        result = RulesEngine(RulesConfig(min_staffing={"cashier": 1})).validate_week(week)
        assert codes(result.violations) == ["weekly_hours_exceeded", "consecutive_days_exceeded"]
        assert result.violations[0].details["limit"] == 72
        assert result.violations[1].details["days"] == 7

    def test_week_run_at_limit_is_allowed(self):
        """주간 검증은 한도 초과만 위반 (월~금 5일 = 한도 5)."""
        assignments = [make_assignment(work_date=MONDAY + timedelta(days=i)) for i in range(5)]
        week = WeekSnapshot(week_start=MONDAY, workers=[make_worker()], assignments=assignments)
        result = RulesEngine(RulesConfig(min_staffing={"cashier": 1})).validate_week(week)
        assert result.valid is True

    def test_fairness_spread_warnings(self):
        workers = [make_worker("a"), make_worker("b")]
        assignments = [
            make_assignment("a", SATURDAY, "PM", start=time(17, 0), end=time(1, 0)),
            make_assignment("b", MONDAY, "AM"),
        ]
        week = WeekSnapshot(week_start=MONDAY, workers=workers, assignments=assignments)
        result = RulesEngine(RulesConfig(min_staffing={})).validate_week(week)
        assert result.valid is True
        assert codes(result.warnings) == ["fairness_weekend_spread", "fairness_evening_spread"]

    def test_fairness_needs_two_workers(self):
        week = WeekSnapshot(
            week_start=MONDAY,
            workers=[make_worker()],
            assignments=[make_assignment(work_date=SATURDAY)],
        )
        assert RulesEngine(RulesConfig(min_staffing={})).validate_week(week).warnings == []

    def test_same_input_same_output(self):
        week = self._full_cover()
        week = week.model_copy(update={"assignments": week.assignments[2:]})
        engine = RulesEngine()
        first = engine.validate_week(week)
        second = engine.validate_week(week)
        assert first.model_dump() == second.model_dump()


class TestRunHelpers:
    """연속 근무 계산 헬퍼 테스트."""

    def test_run_length_through(self):
        dates = {MONDAY, MONDAY + timedelta(days=1), MONDAY + timedelta(days=3)}
        assert run_length_through(MONDAY + timedelta(days=2), dates) == 4
        assert run_length_through(MONDAY + timedelta(days=10), dates) == 1

    def test_maximal_runs(self):
        dates = [MONDAY + timedelta(days=d) for d in (4, 0, 1, 1, 5, 6)]
        assert [length for _, _, length in maximal_runs(dates)] == [2, 3]
