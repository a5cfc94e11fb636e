from django.contrib import admin

from hris.employees import models


@admin.register(models.Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "employee_id",
        "first_name",
        "last_name",
        "shift_start_time",
        "shift_end_time",
        "is_active",
    ]
    search_fields = ["employee_id", "first_name", "last_name", "scan_token"]
    list_filter = ["is_active", "is_deleted", "created_at"]
