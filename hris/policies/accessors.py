from __future__ import annotations

import datetime as dt
from zoneinfo import ZoneInfo

from django.conf import settings

DAY_CODES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def _int_setting(name: str, default: int) -> int:
    value = getattr(settings, name, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _time_setting(name: str, default: str) -> dt.time:
    value = getattr(settings, name, default)
    if isinstance(value, dt.time):
        return value
    try:
        return dt.time.fromisoformat(str(value))
    except ValueError:
        return dt.time.fromisoformat(default)


def attendance_time_zone() -> ZoneInfo:
    """Fixed operating timezone for all shift math (default: Asia/Manila)."""

    name = getattr(settings, "ATTENDANCE_TIME_ZONE", None) or settings.TIME_ZONE
    return ZoneInfo(str(name))


def grace_minutes() -> int:
    """Minutes of lateness tolerated before tardiness is deductible."""

    return _int_setting("ATTENDANCE_GRACE_MINUTES", 15)


def lunch_threshold_minutes() -> int:
    """Gross minutes at which the lunch deduction applies (default: 5 hours)."""

    return _int_setting("ATTENDANCE_LUNCH_THRESHOLD_MINUTES", 300)


def lunch_deduction_minutes() -> int:
    return _int_setting("ATTENDANCE_LUNCH_DEDUCTION_MINUTES", 60)


def default_shift_start() -> dt.time:
    return _time_setting("ATTENDANCE_DEFAULT_SHIFT_START", "08:00")


def default_shift_end() -> dt.time:
    return _time_setting("ATTENDANCE_DEFAULT_SHIFT_END", "17:00")


def default_shift_work_days() -> frozenset[str]:
    """Day codes of the fallback work week (default: Mon-Fri)."""

    days = getattr(
        settings,
        "ATTENDANCE_DEFAULT_SHIFT_WORK_DAYS",
        ["Mon", "Tue", "Wed", "Thu", "Fri"],
    )
    if isinstance(days, str):
        days = days.split(",")
    picked = frozenset(d.strip() for d in days if str(d).strip() in DAY_CODES)
    return picked or frozenset(DAY_CODES[:5])


def overtime_session_scheduled_minutes() -> int:
    """Scheduled minutes for an overtime session; 0 makes all of it overtime."""

    return _int_setting("ATTENDANCE_OVERTIME_SESSION_SCHEDULED_MINUTES", 0)


def default_geofence_radius_meters() -> int:
    return _int_setting("ATTENDANCE_DEFAULT_GEOFENCE_RADIUS_METERS", 100)
