from django.db import models
from django.utils import timezone


class Location(models.Model):
    """A named site with a circular geofence.

    - is_office=True: permanent office location
    - is_office=False: time-bound project site
    A location without coordinates is unrestricted for clock-in purposes.
    """

    name = models.CharField(max_length=200)
    code = models.CharField(max_length=50, unique=True)
    is_office = models.BooleanField(default=False)
    # WGS84, 7 decimal places (~1 cm)
    latitude = models.DecimalField(
        max_digits=10, decimal_places=7, null=True, blank=True
    )
    longitude = models.DecimalField(
        max_digits=10, decimal_places=7, null=True, blank=True
    )
    geo_radius = models.PositiveIntegerField(default=100)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["code"]

    def __str__(self) -> str:  # pragma: no cover - simple repr
        return f"{self.code} {self.name}"


class LocationAssignment(models.Model):
    location = models.ForeignKey(
        Location, on_delete=models.CASCADE, related_name="assignments"
    )
    employee = models.ForeignKey(
        "employees.Employee",
        on_delete=models.CASCADE,
        related_name="location_assignments",
    )
    assigned_date = models.DateField(default=timezone.localdate)
    end_date = models.DateField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["employee", "is_active"],
                name="locassign_employee_active_idx",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - simple repr
        return f"LocationAssignment({self.employee_id}->{self.location_id})"
