from django.contrib import admin

from hris.audit.models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ["id", "created_at", "action", "actor", "model_name", "record_id"]
    search_fields = ["action", "message", "model_name"]
    list_filter = ["action", "created_at"]
    readonly_fields = [
        "action",
        "actor",
        "message",
        "model_name",
        "record_id",
        "payload",
        "created_at",
    ]
