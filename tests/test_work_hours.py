"""근무시간 계산 테스트.

Worked-time tests — overnight wrap, zero-length shifts, clamping, the
regular/overtime split, and peak classification.
"""

from datetime import time

import pytest

from roster.schemas.rules import RulesConfig
from roster.utils.work_hours import (
    calculate_work_hours,
    format_clock,
    is_peak,
    parse_clock,
    span_minutes,
)

MEAL_PERIODS = RulesConfig().meal_periods


class TestSpan:
    """구간 길이 테스트."""

    def test_same_day(self):
        assert span_minutes(time(9, 0), time(17, 0)) == 480

    def test_wraps_past_midnight(self):
        """종료가 시작보다 이르면 익일."""
        assert span_minutes(time(17, 0), time(1, 0)) == 480

    def test_equal_start_end_is_zero(self):
        assert span_minutes(time(12, 0), time(12, 0)) == 0

    def test_clock_parsing(self):
        assert parse_clock("09:30") == time(9, 30)
        assert format_clock(time(1, 5)) == "01:05"


class TestWorkHours:
    """정규/연장 시간 테스트."""

    def test_default_am_block(self):
        """09:00-17:00, 휴게 120분 → 6시간 정규."""
        hours = calculate_work_hours(time(9, 0), time(17, 0), 120)
        assert hours.worked_minutes == 360
        assert hours.regular_hours == 6
        assert hours.overtime_hours == 0

    def test_overnight_block(self):
        hours = calculate_work_hours(time(17, 0), time(1, 0), 120)
        assert hours.total_hours == 6

    def test_overtime_above_threshold(self):
        """08:00-22:00, 휴게 60분 → 13시간 = 정규 8 + 연장 5."""
        hours = calculate_work_hours(time(8, 0), time(22, 0), 60)
        assert hours.regular_hours == 8
        assert hours.overtime_hours == 5

    def test_break_longer_than_shift_clamps_to_zero(self):
        hours = calculate_work_hours(time(9, 0), time(10, 0), 120)
        assert hours.worked_minutes == 0
        assert hours.regular_hours == 0
        assert hours.overtime_hours == 0

    def test_zero_length_shift(self):
        hours = calculate_work_hours(time(9, 0), time(9, 0), 0)
        assert hours.total_hours == 0

    @pytest.mark.parametrize("start,end,brk", [
        (time(9, 0), time(17, 0), 30),
        (time(6, 0), time(23, 0), 45),
        (time(22, 0), time(6, 0), 0),
        (time(10, 15), time(11, 40), 10),
    ])
    def test_split_adds_up(self, start, end, brk):
        hours = calculate_work_hours(start, end, brk)
        assert hours.regular_hours + hours.overtime_hours == pytest.approx(hours.worked_minutes / 60)
        assert hours.regular_hours <= 8

    def test_custom_threshold(self):
        hours = calculate_work_hours(time(9, 0), time(17, 0), 0, regular_threshold=6)
        assert hours.regular_hours == 6
        assert hours.overtime_hours == 2


class TestPeak:
    """피크 시간대 판정 테스트."""

    def test_inside_lunch_window(self):
        assert is_peak(time(11, 0), time(13, 30), MEAL_PERIODS) is True

    def test_inside_dinner_window(self):
        assert is_peak(time(18, 0), time(22, 0), MEAL_PERIODS) is True

    def test_partially_outside(self):
        assert is_peak(time(9, 0), time(13, 0), MEAL_PERIODS) is False

    def test_wrapping_range_is_never_peak(self):
        assert is_peak(time(21, 0), time(1, 0), MEAL_PERIODS) is False
