from django.contrib import admin

from hris.attendance import models


class AttendanceVerificationInline(admin.TabularInline):
    model = models.AttendanceVerification
    extra = 0
    readonly_fields = ["status", "previous_status", "verified_by", "notes", "created_at"]
    can_delete = False


@admin.register(models.AttendanceSession)
class AttendanceSessionAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "employee",
        "scheduled_shift_date",
        "actual_shift_type",
        "time_in",
        "time_out",
        "location",
        "verification_status",
        "ot_status",
    ]
    search_fields = [
        "employee__employee_id",
        "employee__first_name",
        "employee__last_name",
        "justification",
        "admin_notes",
    ]
    list_filter = [
        "scheduled_shift_date",
        "actual_shift_type",
        "verification_status",
        "ot_status",
        "is_overtime_session",
    ]
    readonly_fields = [
        "late_minutes",
        "late_deductible",
        "lunch_deduction_minutes",
        "total_working_minutes",
        "overtime_minutes",
        "created_at",
        "updated_at",
    ]
    inlines = [AttendanceVerificationInline]

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(models.AttendanceVerification)
class AttendanceVerificationAdmin(admin.ModelAdmin):
    list_display = ["id", "session", "status", "previous_status", "verified_by"]
    search_fields = ["notes"]
    list_filter = ["status", "created_at"]
