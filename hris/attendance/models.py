from decimal import Decimal

from django.conf import settings
from django.db import models

from hris.attendance.shifts import ShiftType

COORDINATE_QUANTUM = Decimal("0.0000001")


class VerificationStatus(models.TextChoices):
    VERIFIED = "Verified", "Verified"
    OFF_SITE = "Off-site", "Off-site"
    PENDING = "Pending", "Pending"
    FLAGGED = "Flagged", "Flagged"


class OvertimeStatus(models.TextChoices):
    PENDING = "Pending", "Pending"
    APPROVED = "Approved", "Approved"
    REJECTED = "Rejected", "Rejected"


def _coordinate_field(**kwargs):
    return models.DecimalField(
        max_digits=10, decimal_places=7, null=True, blank=True, **kwargs
    )


class AttendanceSession(models.Model):
    """One time-in/time-out pair.

    - Created only by a successful clock-in (or an admin manual entry)
    - Closed once at clock-out; derived minute fields stay null until then
    - Shift type/date are frozen at creation
    - Never deleted
    """

    employee = models.ForeignKey(
        "employees.Employee",
        on_delete=models.PROTECT,
        related_name="attendance_sessions",
    )
    location = models.ForeignKey(
        "locations.Location",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="attendance_sessions",
    )
    time_in = models.DateTimeField()
    time_out = models.DateTimeField(null=True, blank=True)

    time_in_latitude = _coordinate_field()
    time_in_longitude = _coordinate_field()
    time_in_accuracy = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )
    # Opaque photo reference (URL or storage key); stored, never interpreted.
    time_in_photo = models.TextField(blank=True)
    time_out_latitude = _coordinate_field()
    time_out_longitude = _coordinate_field()
    time_out_accuracy = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )
    time_out_photo = models.TextField(blank=True)

    verification_status = models.CharField(
        max_length=16,
        choices=VerificationStatus.choices,
        default=VerificationStatus.PENDING,
    )
    scheduled_shift_date = models.DateField()
    actual_shift_type = models.CharField(
        max_length=8, choices=ShiftType.choices, default=ShiftType.DAY
    )

    late_minutes = models.IntegerField(null=True, blank=True)
    late_deductible = models.BooleanField(null=True, blank=True)
    lunch_deduction_minutes = models.IntegerField(null=True, blank=True)
    total_working_minutes = models.IntegerField(null=True, blank=True)
    overtime_minutes = models.IntegerField(null=True, blank=True)
    is_overtime_session = models.BooleanField(default=False)
    # Null while no overtime was worked.
    ot_status = models.CharField(
        max_length=16, choices=OvertimeStatus.choices, null=True, blank=True
    )

    justification = models.TextField(blank=True)
    admin_notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-time_in"]
        constraints = [
            models.UniqueConstraint(
                fields=["employee"],
                condition=models.Q(time_out__isnull=True),
                name="uniq_open_attendance_session_per_employee",
            ),
            models.CheckConstraint(
                condition=models.Q(time_out__isnull=True)
                | models.Q(time_out__gt=models.F("time_in")),
                name="attendance_time_out_after_time_in",
            ),
            models.CheckConstraint(
                condition=~models.Q(verification_status="Verified")
                | models.Q(location__isnull=False),
                name="attendance_verified_requires_location",
            ),
        ]
        indexes = [
            models.Index(
                fields=["employee", "scheduled_shift_date"],
                name="attendance_emp_shiftdate_idx",
            ),
            models.Index(fields=["scheduled_shift_date"], name="attendance_date_idx"),
            models.Index(fields=["verification_status"], name="attendance_status_idx"),
            models.Index(fields=["ot_status"], name="attendance_ot_status_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover - simple repr
        return f"AttendanceSession({self.employee_id}@{self.scheduled_shift_date})"

    @property
    def is_open(self) -> bool:
        return self.time_out is None

    @property
    def payable_overtime_minutes(self) -> int:
        """Overtime payroll may count: approved overtime only."""
        if self.ot_status != OvertimeStatus.APPROVED:
            return 0
        return self.overtime_minutes or 0


class AttendanceVerification(models.Model):
    """Audit trail for administrative status changes on a session."""

    session = models.ForeignKey(
        AttendanceSession, on_delete=models.CASCADE, related_name="verifications"
    )
    status = models.CharField(max_length=16, choices=VerificationStatus.choices)
    previous_status = models.CharField(
        max_length=16, choices=VerificationStatus.choices, blank=True
    )
    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True
    )
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover - simple repr
        return f"AttendanceVerification({self.session_id}:{self.status})"
