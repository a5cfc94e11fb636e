from __future__ import annotations

import secrets

from django.db import transaction
from django.utils import timezone

from hris.employees.models import Employee

SCAN_TOKEN_BYTES = 16


def get_by_scan_token(token: str) -> Employee | None:
    """Return the live employee holding `token`, or None.

    Only active employees resolve, matching who payroll summaries cover.
    Soft-deleted employees have their token cleared, but the flag is checked
    as well so a stale token can never resolve.
    """

    if not token:
        return None
    return (
        Employee.objects.filter(scan_token=token, is_active=True, is_deleted=False)
        .first()
    )


def issue_scan_token(employee: Employee) -> str:
    """Assign a fresh 32-character scan token, invalidating the old badge."""

    employee.scan_token = secrets.token_hex(SCAN_TOKEN_BYTES)
    employee.save(update_fields=["scan_token", "updated_at"])
    return employee.scan_token


@transaction.atomic
def soft_delete_employee(employee: Employee) -> Employee:
    employee.is_deleted = True
    employee.is_active = False
    employee.deleted_at = timezone.now()
    employee.scan_token = None
    employee.save(
        update_fields=[
            "is_deleted",
            "is_active",
            "deleted_at",
            "scan_token",
            "updated_at",
        ]
    )
    return employee
