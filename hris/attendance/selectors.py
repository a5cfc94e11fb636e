"""Read-side queries over attendance sessions for payroll and dashboards."""

from __future__ import annotations

import datetime as dt
from dataclasses import asdict
from dataclasses import dataclass

from django.db import models
from django.utils import timezone

from hris.attendance.models import AttendanceSession
from hris.attendance.models import OvertimeStatus
from hris.attendance.models import VerificationStatus
from hris.attendance.shifts import ShiftWindow
from hris.attendance.shifts import to_operating_time


@dataclass(frozen=True)
class AttendanceSummary:
    employee_id: int
    start_date: dt.date
    end_date: dt.date
    scheduled_work_days: int
    days_present: int
    total_working_minutes: int
    total_late_minutes: int
    deductible_late_count: int
    approved_overtime_minutes: int
    pending_overtime_minutes: int
    verified_sessions: int
    flagged_sessions: int

    @property
    def days_absent(self) -> int:
        return max(0, self.scheduled_work_days - self.days_present)

    def as_dict(self) -> dict:
        data = asdict(self)
        data["days_absent"] = self.days_absent
        return data


def operating_today() -> dt.date:
    return to_operating_time(timezone.now()).date()


def closed_sessions(employee, start_date: dt.date, end_date: dt.date):
    return AttendanceSession.objects.filter(
        employee=employee,
        scheduled_shift_date__gte=start_date,
        scheduled_shift_date__lte=end_date,
        time_out__isnull=False,
    )


def summarize(employee, start_date: dt.date, end_date: dt.date) -> AttendanceSummary:
    """Totals payroll reads for one employee over a shift-date range.

    Only closed sessions count, and only approved overtime is payable.
    """
    qs = closed_sessions(employee, start_date, end_date)
    totals = qs.aggregate(
        working=models.Sum("total_working_minutes"),
        late=models.Sum("late_minutes"),
        deductible=models.Count("id", filter=models.Q(late_deductible=True)),
        approved_ot=models.Sum(
            "overtime_minutes", filter=models.Q(ot_status=OvertimeStatus.APPROVED)
        ),
        pending_ot=models.Sum(
            "overtime_minutes", filter=models.Q(ot_status=OvertimeStatus.PENDING)
        ),
        verified=models.Count(
            "id", filter=models.Q(verification_status=VerificationStatus.VERIFIED)
        ),
        flagged=models.Count(
            "id",
            filter=models.Q(
                verification_status__in=[
                    VerificationStatus.FLAGGED,
                    VerificationStatus.OFF_SITE,
                ]
            ),
        ),
    )
    days_present = qs.values("scheduled_shift_date").distinct().count()
    window = ShiftWindow.for_employee(employee)
    return AttendanceSummary(
        employee_id=employee.pk,
        start_date=start_date,
        end_date=end_date,
        scheduled_work_days=window.work_days_between(start_date, end_date),
        days_present=days_present,
        total_working_minutes=totals["working"] or 0,
        total_late_minutes=totals["late"] or 0,
        deductible_late_count=totals["deductible"] or 0,
        approved_overtime_minutes=totals["approved_ot"] or 0,
        pending_overtime_minutes=totals["pending_ot"] or 0,
        verified_sessions=totals["verified"] or 0,
        flagged_sessions=totals["flagged"] or 0,
    )


def today_sessions(on_date: dt.date | None = None):
    """Sessions on today's scheduled shift date, open ones included."""
    target = on_date or operating_today()
    return (
        AttendanceSession.objects.filter(scheduled_shift_date=target)
        .select_related("employee", "location")
        .order_by("time_in")
    )
