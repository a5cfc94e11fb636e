"""Standalone policy module.

This package centralizes attendance policy values. The engine imports
tunables from here instead of embedding constants locally.
"""

from .accessors import attendance_time_zone
from .accessors import default_geofence_radius_meters
from .accessors import default_shift_end
from .accessors import default_shift_start
from .accessors import default_shift_work_days
from .accessors import grace_minutes
from .accessors import lunch_deduction_minutes
from .accessors import lunch_threshold_minutes
from .accessors import overtime_session_scheduled_minutes

__all__ = [
    "attendance_time_zone",
    "default_geofence_radius_meters",
    "default_shift_end",
    "default_shift_start",
    "default_shift_work_days",
    "grace_minutes",
    "lunch_deduction_minutes",
    "lunch_threshold_minutes",
    "overtime_session_scheduled_minutes",
]
