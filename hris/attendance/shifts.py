"""Day/night shift classification in the fixed operating timezone.

Clock-ins from 06:00 to 21:59 are day shifts. Clock-ins from 22:00 to 05:59
are night shifts; an after-midnight clock-in belongs to the evening the shift
started, so its scheduled shift date is the previous calendar day.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from dataclasses import field

from django.db import models
from django.utils import timezone

from hris.policies import attendance_time_zone
from hris.policies import default_shift_end
from hris.policies import default_shift_start
from hris.policies import default_shift_work_days
from hris.policies.accessors import DAY_CODES

DAY_SHIFT_START_HOUR = 6
NIGHT_SHIFT_START_HOUR = 22


class ShiftType(models.TextChoices):
    DAY = "day", "Day"
    NIGHT = "night", "Night"


@dataclass(frozen=True)
class ShiftClassification:
    shift_type: ShiftType
    scheduled_shift_date: dt.date
    local_time: dt.datetime


def to_operating_time(value: dt.datetime) -> dt.datetime:
    """Express `value` in the operating timezone.

    Naive datetimes are taken to be operating-timezone wall clock already;
    server and request timezones never enter the calculation.
    """
    tz = attendance_time_zone()
    if timezone.is_naive(value):
        return timezone.make_aware(value, tz)
    return timezone.localtime(value, tz)


def classify(clock_in: dt.datetime) -> ShiftClassification:
    local = to_operating_time(clock_in)
    hour = local.hour
    if DAY_SHIFT_START_HOUR <= hour < NIGHT_SHIFT_START_HOUR:
        return ShiftClassification(ShiftType.DAY, local.date(), local)
    if hour >= NIGHT_SHIFT_START_HOUR:
        return ShiftClassification(ShiftType.NIGHT, local.date(), local)
    return ShiftClassification(
        ShiftType.NIGHT, local.date() - dt.timedelta(days=1), local
    )


def parse_work_days(value: str | None) -> frozenset[str]:
    if not value:
        return frozenset()
    return frozenset(
        part.strip() for part in value.split(",") if part.strip() in DAY_CODES
    )


@dataclass(frozen=True)
class ShiftWindow:
    """An employee's configured shift: start, end and work days."""

    start: dt.time
    end: dt.time
    work_days: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def default(cls) -> ShiftWindow:
        return cls(
            start=default_shift_start(),
            end=default_shift_end(),
            work_days=default_shift_work_days(),
        )

    @classmethod
    def for_employee(cls, employee) -> ShiftWindow:
        start = getattr(employee, "shift_start_time", None)
        end = getattr(employee, "shift_end_time", None)
        if not (start and end):
            return cls.default()
        work_days = parse_work_days(getattr(employee, "shift_work_days", ""))
        return cls(
            start=start,
            end=end,
            work_days=work_days or default_shift_work_days(),
        )

    @property
    def is_overnight(self) -> bool:
        return self.end <= self.start

    @property
    def duration_minutes(self) -> int:
        start = self.start.hour * 60 + self.start.minute
        end = self.end.hour * 60 + self.end.minute
        if self.is_overnight:
            end += 24 * 60
        return end - start

    def is_work_day(self, day: dt.date) -> bool:
        return DAY_CODES[day.weekday()] in self.work_days

    def work_days_between(self, start: dt.date, end: dt.date) -> int:
        count = 0
        day = start
        while day <= end:
            if self.is_work_day(day):
                count += 1
            day += dt.timedelta(days=1)
        return count
