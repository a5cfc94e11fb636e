from django.conf import settings
from django.db import models


class Employee(models.Model):
    """Employee directory entry as seen by the attendance engine.

    Only identity, the scan token and the shift configuration live here;
    richer HR records are owned elsewhere.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="employee",
    )
    employee_id = models.CharField(max_length=50, unique=True, blank=True, null=True)
    first_name = models.CharField(max_length=150, blank=True)
    last_name = models.CharField(max_length=150, blank=True)
    # Opaque token printed on the employee's QR badge; cleared on soft delete.
    scan_token = models.CharField(max_length=64, unique=True, blank=True, null=True)
    shift_start_time = models.TimeField(null=True, blank=True)
    shift_end_time = models.TimeField(null=True, blank=True)
    # Comma-separated day codes: Mon,Tue,Wed,Thu,Fri
    shift_work_days = models.CharField(max_length=50, blank=True)
    is_active = models.BooleanField(default=True)
    is_deleted = models.BooleanField(default=False)
    deleted_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["last_name", "first_name", "pk"]

    def __str__(self):  # pragma: no cover - trivial
        return f"Employee({self.employee_id or self.pk})"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
