import datetime as dt

import pytest

from hris.attendance.accounting import account
from hris.attendance.accounting import late_minutes_for
from hris.attendance.accounting import minutes_between
from hris.attendance.accounting import scheduled_minutes_for
from hris.attendance.exceptions import InvalidInterval
from hris.attendance.shifts import ShiftWindow
from tests.factories import manila

EIGHT = dt.time(8, 0)


def test_full_regular_day():
    result = account(manila(2026, 3, 2, 8), manila(2026, 3, 2, 17), EIGHT)
    assert result.as_dict() == {
        "gross_minutes": 540,
        "lunch_deduction_minutes": 60,
        "net_minutes": 480,
        "late_minutes": 0,
        "late_deductible": False,
        "overtime_minutes": 0,
    }


def test_late_half_day_has_no_lunch_deduction():
    result = account(
        manila(2026, 3, 2, 8, 20), manila(2026, 3, 2, 12), EIGHT, grace_minutes=15
    )
    assert result.late_minutes == 20
    assert result.late_deductible is True
    assert result.gross_minutes == 220
    assert result.lunch_deduction_minutes == 0
    assert result.net_minutes == 220


def test_lateness_within_grace_is_not_deductible():
    result = account(manila(2026, 3, 2, 8, 10), manila(2026, 3, 2, 17), EIGHT)
    assert result.late_minutes == 10
    assert result.late_deductible is False


def test_lateness_at_grace_is_deductible():
    result = account(manila(2026, 3, 2, 8, 15), manila(2026, 3, 2, 17), EIGHT)
    assert result.late_deductible is True


def test_zero_grace_makes_every_session_deductible():
    result = account(
        manila(2026, 3, 2, 7, 55), manila(2026, 3, 2, 17), EIGHT, grace_minutes=0
    )
    assert result.late_minutes == 0
    assert result.late_deductible is True


def test_lunch_threshold_is_inclusive():
    result = account(manila(2026, 3, 2, 8), manila(2026, 3, 2, 13), EIGHT)
    assert result.gross_minutes == 300
    assert result.lunch_deduction_minutes == 60


def test_overtime_beyond_scheduled_minutes():
    result = account(manila(2026, 3, 2, 8), manila(2026, 3, 2, 19, 30), EIGHT)
    assert result.net_minutes == 630
    assert result.overtime_minutes == 150


def test_overtime_session_counts_everything():
    result = account(
        manila(2026, 3, 2, 18),
        manila(2026, 3, 2, 20),
        None,
        scheduled_minutes=0,
    )
    assert result.late_minutes == 0
    assert result.overtime_minutes == 120


def test_overnight_session_crosses_midnight():
    result = account(
        manila(2026, 3, 2, 22), manila(2026, 3, 3, 6), dt.time(22, 0)
    )
    assert result.gross_minutes == 480
    assert result.net_minutes == 420


def test_late_uses_wall_clock_time_of_day():
    assert late_minutes_for(dt.time(9, 5, 59), EIGHT) == 65
    assert late_minutes_for(dt.time(7, 0), EIGHT) == 0
    assert late_minutes_for(dt.time(9, 0), None) == 0


def test_late_is_measured_in_operating_timezone():
    # 00:20 UTC is 08:20 in Manila.
    time_in = dt.datetime(2026, 3, 2, 0, 20, tzinfo=dt.UTC)
    result = account(time_in, time_in + dt.timedelta(hours=4), EIGHT)
    assert result.late_minutes == 20


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(29, 0), (30, 1), (89, 1), (90, 2), (600, 10)],
)
def test_minutes_round_half_up(seconds, expected):
    start = manila(2026, 3, 2, 8)
    assert minutes_between(start, start + dt.timedelta(seconds=seconds)) == expected


def test_scheduled_minutes_of_default_window():
    assert scheduled_minutes_for(ShiftWindow.default()) == 480


def test_scheduled_minutes_of_short_window_has_no_lunch():
    window = ShiftWindow(start=dt.time(8, 0), end=dt.time(12, 0))
    assert scheduled_minutes_for(window) == 240


@pytest.mark.parametrize("delta", [dt.timedelta(0), dt.timedelta(minutes=-5)])
def test_time_out_not_after_time_in_is_invalid(delta):
    time_in = manila(2026, 3, 2, 8)
    with pytest.raises(InvalidInterval):
        account(time_in, time_in + delta, EIGHT)
