import django.db.models.deletion
from django.conf import settings
from django.db import migrations
from django.db import models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("employees", "0001_initial"),
        ("locations", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AttendanceSession",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("time_in", models.DateTimeField()),
                ("time_out", models.DateTimeField(blank=True, null=True)),
                (
                    "time_in_latitude",
                    models.DecimalField(
                        blank=True, decimal_places=7, max_digits=10, null=True
                    ),
                ),
                (
                    "time_in_longitude",
                    models.DecimalField(
                        blank=True, decimal_places=7, max_digits=10, null=True
                    ),
                ),
                (
                    "time_in_accuracy",
                    models.DecimalField(
                        blank=True, decimal_places=2, max_digits=10, null=True
                    ),
                ),
                ("time_in_photo", models.TextField(blank=True)),
                (
                    "time_out_latitude",
                    models.DecimalField(
                        blank=True, decimal_places=7, max_digits=10, null=True
                    ),
                ),
                (
                    "time_out_longitude",
                    models.DecimalField(
                        blank=True, decimal_places=7, max_digits=10, null=True
                    ),
                ),
                (
                    "time_out_accuracy",
                    models.DecimalField(
                        blank=True, decimal_places=2, max_digits=10, null=True
                    ),
                ),
                ("time_out_photo", models.TextField(blank=True)),
                (
                    "verification_status",
                    models.CharField(
                        choices=[
                            ("Verified", "Verified"),
                            ("Off-site", "Off-site"),
                            ("Pending", "Pending"),
                            ("Flagged", "Flagged"),
                        ],
                        default="Pending",
                        max_length=16,
                    ),
                ),
                ("scheduled_shift_date", models.DateField()),
                (
                    "actual_shift_type",
                    models.CharField(
                        choices=[("day", "Day"), ("night", "Night")],
                        default="day",
                        max_length=8,
                    ),
                ),
                ("late_minutes", models.IntegerField(blank=True, null=True)),
                ("late_deductible", models.BooleanField(blank=True, null=True)),
                ("lunch_deduction_minutes", models.IntegerField(blank=True, null=True)),
                ("total_working_minutes", models.IntegerField(blank=True, null=True)),
                ("overtime_minutes", models.IntegerField(blank=True, null=True)),
                ("is_overtime_session", models.BooleanField(default=False)),
                (
                    "ot_status",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("Pending", "Pending"),
                            ("Approved", "Approved"),
                            ("Rejected", "Rejected"),
                        ],
                        max_length=16,
                        null=True,
                    ),
                ),
                ("justification", models.TextField(blank=True)),
                ("admin_notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "employee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="attendance_sessions",
                        to="employees.employee",
                    ),
                ),
                (
                    "location",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="attendance_sessions",
                        to="locations.location",
                    ),
                ),
            ],
            options={
                "ordering": ["-time_in"],
                "indexes": [
                    models.Index(
                        fields=["employee", "scheduled_shift_date"],
                        name="attendance_emp_shiftdate_idx",
                    ),
                    models.Index(
                        fields=["scheduled_shift_date"], name="attendance_date_idx"
                    ),
                    models.Index(
                        fields=["verification_status"], name="attendance_status_idx"
                    ),
                    models.Index(fields=["ot_status"], name="attendance_ot_status_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("time_out__isnull", True)),
                        fields=("employee",),
                        name="uniq_open_attendance_session_per_employee",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("time_out__isnull", True),
                            ("time_out__gt", models.F("time_in")),
                            _connector="OR",
                        ),
                        name="attendance_time_out_after_time_in",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("verification_status", "Verified"), _negated=True),
                            ("location__isnull", False),
                            _connector="OR",
                        ),
                        name="attendance_verified_requires_location",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="AttendanceVerification",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("Verified", "Verified"),
                            ("Off-site", "Off-site"),
                            ("Pending", "Pending"),
                            ("Flagged", "Flagged"),
                        ],
                        max_length=16,
                    ),
                ),
                (
                    "previous_status",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("Verified", "Verified"),
                            ("Off-site", "Off-site"),
                            ("Pending", "Pending"),
                            ("Flagged", "Flagged"),
                        ],
                        max_length=16,
                    ),
                ),
                ("notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "session",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="verifications",
                        to="attendance.attendancesession",
                    ),
                ),
                (
                    "verified_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
