"""규칙 엔진 — 노동 정책 기반 배정/주간 검증.

Rules engine. Validates a single assignment or a whole store-week against
the labor policy held in a RulesConfig snapshot, and answers the
availability question used by the auto-assignment heuristic.

The engine is pure: it never touches the database and never mutates its
inputs. The same config and the same snapshot always yield the same
ordered result.

Issue codes:
    Violations (block leaving draft):
        - daily_hours_exceeded
        - consecutive_days_exceeded
        - break_below_minimum
        - weekly_hours_exceeded
        - staffing_shortfall
    Warnings (advisory):
        - break_below_standard
        - skill_mismatch
        - fairness_weekend_spread
        - fairness_evening_spread
"""

from collections import defaultdict
from collections.abc import Collection, Iterable
from datetime import date, timedelta

from roster.constants import ALL_SKILLS, PART_TIME, PERIODS, PM, ROLE_PRIORITY
from roster.schemas.roster import WorkerProfile
from roster.schemas.rules import RulesConfig, ValidationIssue, ValidationResult, WorkHours
from roster.schemas.schedule import AssignmentSnapshot, SlotSnapshot, WeekSnapshot
from roster.utils.work_hours import calculate_work_hours

# 연속 근무 탐색 범위(일) — Days scanned on each side of the target date
CONSECUTIVE_SCAN_DAYS: int = 7


def role_order(role: str) -> tuple[int, str]:
    """역할 정렬 키 — priority order first, unknown roles after, alphabetically."""
    if role in ROLE_PRIORITY:
        return ROLE_PRIORITY.index(role), role
    return len(ROLE_PRIORITY), role


def period_order(period: str) -> int:
    return PERIODS.index(period) if period in PERIODS else len(PERIODS)


def run_length_through(target: date, dates: Collection[date], scan_days: int = CONSECUTIVE_SCAN_DAYS) -> int:
    """대상일을 포함한 연속 근무일 수.

    Length of the run of consecutive dates passing through ``target``,
    looking at most ``scan_days`` back and forward. ``target`` counts
    whether or not it is in ``dates``.
    """
    before = 0
    while before < scan_days and target - timedelta(days=before + 1) in dates:
        before += 1
    after = 0
    while after < scan_days and target + timedelta(days=after + 1) in dates:
        after += 1
    return before + 1 + after


def maximal_runs(dates: Iterable[date]) -> list[tuple[date, date, int]]:
    """정렬된 날짜들의 최대 연속 구간 — (first, last, length) per maximal run."""
    runs: list[tuple[date, date, int]] = []
    for current in sorted(set(dates)):
        if runs and runs[-1][1] + timedelta(days=1) == current:
            first, _, length = runs[-1]
            runs[-1] = (first, current, length + 1)
        else:
            runs.append((current, current, 1))
    return runs


def _ratio_spread(ratios: dict[str, float]) -> float:
    return max(ratios.values()) - min(ratios.values())


class RulesEngine:
    """노동 정책 규칙 엔진.

    Stateless validator bound to one RulesConfig snapshot.

    Usage:
        engine = RulesEngine(config)
        result = engine.validate_week(week)
    """

    def __init__(self, config: RulesConfig | None = None) -> None:
        self.config: RulesConfig = config or RulesConfig()

    # --- 근무시간 (Hours) ---

    def hours_for(self, assignment: AssignmentSnapshot, worker: WorkerProfile | None = None) -> WorkHours:
        """배정 1건의 근무시간 — uses the worker category's regular threshold."""
        limit = self.config.limit_for(worker.category if worker else "")
        return calculate_work_hours(
            assignment.start_time,
            assignment.end_time,
            assignment.break_minutes,
            regular_threshold=limit.regular_hours,
        )

    # --- 가용성 (Availability) ---

    def is_eligible(
        self,
        worker: WorkerProfile,
        work_date: date,
        period: str,
        time_off: Collection[tuple[str, date]] = (),
    ) -> bool:
        """근무자가 해당 날짜/시간대에 배정 가능한지 판단합니다.

        Availability predicate. Approved time off excludes the worker.
        Part-time workers are further filtered by their shift type's rule
        entry: allowed periods, ``weekend_only``, and ``weekday_only``.
        Full-time workers and unknown or missing shift types are unrestricted.

        Args:
            worker: 근무자 스냅샷 (Worker snapshot)
            work_date: 근무일 (Date of the slot)
            period: 시간대 (AM | PM)
            time_off: 승인된 휴가 (worker_id, date) 쌍 (Approved time-off pairs)

        Returns:
            bool: 배정 가능 여부 (Whether the worker may take the slot)
        """
        if (worker.id, work_date) in time_off:
            return False
        if worker.category != PART_TIME or not worker.pt_shift_type:
            return True

        rule = self.config.pt_shift_types.get(worker.pt_shift_type)
        if rule is None:
            return True

        is_weekend = work_date.weekday() >= 5
        if period not in rule.allowed_periods:
            return False
        if rule.weekend_only and not is_weekend:
            return False
        if rule.weekday_only and is_weekend:
            return False
        return True

    @staticmethod
    def has_skill(worker: WorkerProfile, role: str) -> bool:
        """역할 수행 가능 여부 — no skill data, or "all", counts as capable."""
        return not worker.skills or ALL_SKILLS in worker.skills or role in worker.skills

    # --- 단건 검증 (Single assignment) ---

    def validate_assignment(
        self,
        assignment: AssignmentSnapshot,
        worker: WorkerProfile,
        existing_for_worker: Iterable[AssignmentSnapshot] = (),
    ) -> ValidationResult:
        """배정 1건을 근무자의 기존 배정과 함께 검증합니다.

        Validate one assignment against the worker's other assignments.
        An existing assignment in the same (date, period) is treated as the
        target itself and ignored.

        Checks:
            - 일일 근무시간 한도 (target plus same-date assignments)
            - 연속 근무일 한도 (run through the target date, ±7 days; flagged once it reaches the limit)
            - 최소 휴게 (violation) / 표준 휴게 (warning)
            - 역할 스킬 (warning only)
        """
        violations: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []
        limit = self.config.limit_for(worker.category)

        others = [
            other for other in existing_for_worker
            if not (other.work_date == assignment.work_date and other.period == assignment.period)
        ]

        # 일일 근무시간 — Daily hours
        target_hours = self.hours_for(assignment, worker)
        daily_hours = target_hours.total_hours + sum(
            self.hours_for(other, worker).total_hours
            for other in others
            if other.work_date == assignment.work_date
        )
        if daily_hours > limit.max_daily_hours:
            violations.append(ValidationIssue(
                code="daily_hours_exceeded",
                message=(
                    f"{worker.name} works {daily_hours:g}h on {assignment.work_date.isoformat()}, "
                    f"above the {limit.max_daily_hours:g}h daily limit"
                ),
                worker_id=worker.id,
                work_date=assignment.work_date,
                period=assignment.period,
                details={"hours": daily_hours, "limit": limit.max_daily_hours},
            ))

        # 연속 근무일 — Consecutive days through the target date
        window = {
            other.work_date for other in others
            if abs((other.work_date - assignment.work_date).days) <= CONSECUTIVE_SCAN_DAYS
        }
        run = run_length_through(assignment.work_date, window)
        if run >= limit.max_consecutive_days:
            violations.append(ValidationIssue(
                code="consecutive_days_exceeded",
                message=(
                    f"{worker.name} would work {run} consecutive days, "
                    f"reaching the limit of {limit.max_consecutive_days}"
                ),
                worker_id=worker.id,
                work_date=assignment.work_date,
                details={"days": run, "limit": limit.max_consecutive_days},
            ))

        # 휴게 — Break floor and standard break
        if assignment.break_minutes < self.config.min_break_minutes:
            violations.append(ValidationIssue(
                code="break_below_minimum",
                message=(
                    f"Break of {assignment.break_minutes} min is below the "
                    f"{self.config.min_break_minutes} min minimum"
                ),
                worker_id=worker.id,
                work_date=assignment.work_date,
                period=assignment.period,
                details={"break_minutes": assignment.break_minutes, "minimum": self.config.min_break_minutes},
            ))
        elif assignment.break_minutes < self.config.standard_break_minutes:
            shortfall = self.config.standard_break_minutes - assignment.break_minutes
            warnings.append(ValidationIssue(
                code="break_below_standard",
                message=(
                    f"Break is {shortfall} min short of the {self.config.standard_break_minutes} min "
                    f"standard; the shortfall counts toward overtime"
                ),
                worker_id=worker.id,
                work_date=assignment.work_date,
                period=assignment.period,
                details={"shortfall_minutes": shortfall, "overtime_minutes": shortfall},
            ))

        # 스킬 — Role skill (advisory)
        if not self.has_skill(worker, assignment.role):
            warnings.append(ValidationIssue(
                code="skill_mismatch",
                message=f"{worker.name} is not tagged with the '{assignment.role}' skill",
                worker_id=worker.id,
                work_date=assignment.work_date,
                period=assignment.period,
                role=assignment.role,
            ))

        return ValidationResult(valid=not violations, violations=violations, warnings=warnings)

    # --- 주간 검증 (Whole week) ---

    def validate_week(self, week: WeekSnapshot) -> ValidationResult:
        """주간 스케줄 전체를 검증합니다.

        Validate a whole store-week: weekly hours and consecutive-day runs
        per worker, minimum staffing per (date, period, role) cell, and the
        fairness spread of weekend and evening ratios.

        Violations are ordered by check, then worker id or cell; the result
        depends only on the config and the snapshot.
        """
        violations: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []

        workers = {worker.id: worker for worker in week.workers}
        by_worker: dict[str, list[AssignmentSnapshot]] = defaultdict(list)
        for assignment in week.assignments:
            by_worker[assignment.worker_id].append(assignment)

        for worker_id in sorted(by_worker):
            worker = workers.get(worker_id)
            violations.extend(self._check_worker_week(worker_id, worker, by_worker[worker_id]))

        violations.extend(self._check_staffing(week))
        warnings.extend(self._check_fairness(by_worker))

        return ValidationResult(valid=not violations, violations=violations, warnings=warnings)

    def _check_worker_week(
        self,
        worker_id: str,
        worker: WorkerProfile | None,
        assignments: list[AssignmentSnapshot],
    ) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        limit = self.config.limit_for(worker.category if worker else "")
        name = worker.name if worker else worker_id

        weekly_hours = sum(self.hours_for(a, worker).total_hours for a in assignments)
        weekly_limit = limit.max_daily_hours * self.config.weekly_day_factor
        if weekly_hours > weekly_limit:
            issues.append(ValidationIssue(
                code="weekly_hours_exceeded",
                message=f"{name} is scheduled {weekly_hours:g}h this week, above the {weekly_limit:g}h limit",
                worker_id=worker_id,
                details={"hours": weekly_hours, "limit": weekly_limit},
            ))

        for first, last, length in maximal_runs(a.work_date for a in assignments):
            if length > limit.max_consecutive_days:
                issues.append(ValidationIssue(
                    code="consecutive_days_exceeded",
                    message=(
                        f"{name} works {length} consecutive days "
                        f"({first.isoformat()} to {last.isoformat()}), above the limit of "
                        f"{limit.max_consecutive_days}"
                    ),
                    worker_id=worker_id,
                    work_date=first,
                    details={
                        "days": length,
                        "limit": limit.max_consecutive_days,
                        "from": first.isoformat(),
                        "to": last.isoformat(),
                    },
                ))
        return issues

    def _staffing_cells(self, week: WeekSnapshot) -> list[SlotSnapshot]:
        """검사 대상 셀 — the week's slots, or slots implied by the assignments."""
        if week.slots:
            cells = list(week.slots)
        else:
            pairs = {(a.work_date, a.period) for a in week.assignments}
            cells = [
                SlotSnapshot(work_date=work_date, period=period, min_staffing=dict(self.config.min_staffing))
                for work_date, period in pairs
            ]
        return sorted(cells, key=lambda slot: (slot.work_date, period_order(slot.period)))

    def _check_staffing(self, week: WeekSnapshot) -> list[ValidationIssue]:
        counts: dict[tuple[date, str, str], int] = defaultdict(int)
        for a in week.assignments:
            counts[(a.work_date, a.period, a.role)] += 1

        issues: list[ValidationIssue] = []
        for slot in self._staffing_cells(week):
            for role in sorted(slot.min_staffing, key=role_order):
                required = slot.min_staffing[role]
                assigned = counts[(slot.work_date, slot.period, role)]
                if assigned < required:
                    issues.append(ValidationIssue(
                        code="staffing_shortfall",
                        message=(
                            f"{slot.work_date.isoformat()} {slot.period} needs {required} {role}, "
                            f"{assigned} assigned"
                        ),
                        work_date=slot.work_date,
                        period=slot.period,
                        role=role,
                        details={"required": required, "assigned": assigned, "shortfall": required - assigned},
                    ))
        return issues

    def _check_fairness(self, by_worker: dict[str, list[AssignmentSnapshot]]) -> list[ValidationIssue]:
        active = {worker_id: items for worker_id, items in by_worker.items() if items}
        if len(active) < 2:
            return []

        weekend: dict[str, float] = {}
        evening: dict[str, float] = {}
        for worker_id in sorted(active):
            items = active[worker_id]
            weekend[worker_id] = sum(1 for a in items if a.work_date.weekday() >= 5) / len(items)
            evening[worker_id] = sum(1 for a in items if a.period == PM) / len(items)

        threshold = self.config.fairness_spread_threshold
        issues: list[ValidationIssue] = []
        for code, label, ratios in (
            ("fairness_weekend_spread", "weekend", weekend),
            ("fairness_evening_spread", "evening", evening),
        ):
            spread = _ratio_spread(ratios)
            if spread > threshold:
                issues.append(ValidationIssue(
                    code=code,
                    message=f"Share of {label} shifts varies by {spread:.2f} across workers (limit {threshold:g})",
                    details={
                        "spread": round(spread, 4),
                        "threshold": threshold,
                        "ratios": {worker_id: round(value, 4) for worker_id, value in ratios.items()},
                    },
                ))
        return issues

