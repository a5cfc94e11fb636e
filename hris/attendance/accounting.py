"""Payroll-relevant time accounting for a closed session.

Everything here is a pure function of its arguments.
"""

from __future__ import annotations

import datetime as dt
import math
from dataclasses import asdict
from dataclasses import dataclass

from hris.attendance.exceptions import InvalidInterval
from hris.attendance.shifts import ShiftWindow
from hris.attendance.shifts import to_operating_time

DEFAULT_GRACE_MINUTES = 15
DEFAULT_LUNCH_THRESHOLD_MINUTES = 300
DEFAULT_LUNCH_DEDUCTION_MINUTES = 60
DEFAULT_SCHEDULED_MINUTES = 480


@dataclass(frozen=True)
class TimeBreakdown:
    gross_minutes: int
    lunch_deduction_minutes: int
    net_minutes: int
    late_minutes: int
    late_deductible: bool
    overtime_minutes: int

    def as_dict(self) -> dict:
        return asdict(self)


def minutes_between(start: dt.datetime, end: dt.datetime) -> int:
    """Elapsed minutes, rounded half up."""
    return math.floor((end - start).total_seconds() / 60 + 0.5)


def lunch_deduction_for(
    gross_minutes: int,
    *,
    threshold_minutes: int = DEFAULT_LUNCH_THRESHOLD_MINUTES,
    deduction_minutes: int = DEFAULT_LUNCH_DEDUCTION_MINUTES,
) -> int:
    return deduction_minutes if gross_minutes >= threshold_minutes else 0


def late_minutes_for(clock_in: dt.time, shift_start: dt.time | None) -> int:
    """Minutes past shift start, comparing wall-clock time of day only."""
    if shift_start is None:
        return 0
    actual = clock_in.hour * 60 + clock_in.minute
    scheduled = shift_start.hour * 60 + shift_start.minute
    return max(0, actual - scheduled)


def scheduled_minutes_for(
    window: ShiftWindow,
    *,
    lunch_threshold_minutes: int = DEFAULT_LUNCH_THRESHOLD_MINUTES,
    lunch_deduction_minutes: int = DEFAULT_LUNCH_DEDUCTION_MINUTES,
) -> int:
    """Payable minutes of a full shift: 08:00-17:00 yields 480."""
    duration = window.duration_minutes
    return duration - lunch_deduction_for(
        duration,
        threshold_minutes=lunch_threshold_minutes,
        deduction_minutes=lunch_deduction_minutes,
    )


def account(  # noqa: PLR0913
    time_in: dt.datetime,
    time_out: dt.datetime,
    shift_start: dt.time | None,
    grace_minutes: int = DEFAULT_GRACE_MINUTES,
    *,
    scheduled_minutes: int = DEFAULT_SCHEDULED_MINUTES,
    lunch_threshold_minutes: int = DEFAULT_LUNCH_THRESHOLD_MINUTES,
    lunch_deduction_minutes: int = DEFAULT_LUNCH_DEDUCTION_MINUTES,
) -> TimeBreakdown:
    """Compute the minute breakdown of a session.

    Raises:
        InvalidInterval: if ``time_out`` is not strictly after ``time_in``.
    """
    if time_out <= time_in:
        raise InvalidInterval(
            time_in=time_in.isoformat(),
            time_out=time_out.isoformat(),
        )

    gross = minutes_between(time_in, time_out)
    lunch = lunch_deduction_for(
        gross,
        threshold_minutes=lunch_threshold_minutes,
        deduction_minutes=lunch_deduction_minutes,
    )
    net = gross - lunch
    late = late_minutes_for(to_operating_time(time_in).time(), shift_start)
    return TimeBreakdown(
        gross_minutes=gross,
        lunch_deduction_minutes=lunch,
        net_minutes=net,
        late_minutes=late,
        late_deductible=late >= grace_minutes,
        overtime_minutes=max(0, net - scheduled_minutes),
    )
