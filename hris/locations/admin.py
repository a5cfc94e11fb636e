from django.contrib import admin

from hris.locations import models


@admin.register(models.Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "code",
        "name",
        "is_office",
        "latitude",
        "longitude",
        "geo_radius",
        "is_active",
    ]
    search_fields = ["code", "name"]
    list_filter = ["is_office", "is_active"]


@admin.register(models.LocationAssignment)
class LocationAssignmentAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "employee",
        "location",
        "assigned_date",
        "end_date",
        "is_active",
    ]
    list_filter = ["is_active", "assigned_date"]
