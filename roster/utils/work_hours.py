"""근무시간 계산 유틸리티.

Worked-time arithmetic for a single shift: worked minutes, the
regular/overtime split, and meal-period (peak) classification.
All functions are pure.
"""

from collections.abc import Mapping
from datetime import time

from roster.schemas.rules import TimeWindow, WorkHours

MINUTES_PER_DAY: int = 24 * 60


def parse_clock(value: str) -> time:
    """ "HH:MM" 문자열을 time으로 변환 — Parse "HH:MM" into a time."""
    hours, minutes = value.strip().split(":")
    return time(int(hours), int(minutes))


def format_clock(value: time) -> str:
    return value.strftime("%H:%M")


def _minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def span_minutes(start: time, end: time) -> int:
    """시작~종료 구간 길이(분).

    Length of a start→end span. ``end < start`` wraps past midnight;
    ``end == start`` is a zero-length span.
    """
    diff = _minutes(end) - _minutes(start)
    if diff < 0:
        diff += MINUTES_PER_DAY
    return diff


def calculate_work_hours(
    start: time,
    end: time,
    break_minutes: int,
    regular_threshold: float = 8,
) -> WorkHours:
    """실 근무시간과 정규/연장 시간을 계산합니다.

    Compute worked minutes and split them into regular and overtime hours.
    Worked minutes are clamped to zero, so a break longer than the shift
    yields 0 rather than a negative value.

    Args:
        start: 시작 시각 (Shift start)
        end: 종료 시각, 시작보다 이르면 익일 (Shift end; earlier than start means next day)
        break_minutes: 휴게 시간(분) (Unpaid break)
        regular_threshold: 정규 근무 한도 시간 (Hours counted as regular)

    Returns:
        WorkHours: regular_hours + overtime_hours == worked_minutes / 60
    """
    worked = max(span_minutes(start, end) - break_minutes, 0)
    total = worked / 60
    regular = min(total, regular_threshold)
    overtime = max(total - regular_threshold, 0)
    return WorkHours(
        worked_minutes=worked,
        total_hours=total,
        regular_hours=regular,
        overtime_hours=overtime,
    )


def is_peak(start: time, end: time, meal_periods: Mapping[str, TimeWindow]) -> bool:
    """식사 피크 시간대 여부 — True when the range lies wholly inside one meal window.

    Ranges that wrap past midnight are never peak. Reporting only.
    """
    if end < start:
        return False
    for window in meal_periods.values():
        if window.start <= start and end <= window.end:
            return True
    return False
