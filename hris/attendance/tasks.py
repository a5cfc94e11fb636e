import datetime as dt
import logging

from celery import shared_task

from hris.attendance.selectors import operating_today
from hris.attendance.selectors import summarize
from hris.employees.models import Employee

logger = logging.getLogger(__name__)


@shared_task(name="attendance.period_summaries")
def period_summaries(
    start_iso: str | None = None, end_iso: str | None = None
) -> list[dict]:
    """Summarize attendance of every active employee for payroll.

    Args:
        start_iso: first shift date (YYYY-MM-DD). Defaults to yesterday in
            the operating timezone.
        end_iso: last shift date, inclusive. Defaults to ``start_iso``.

    Returns:
        One JSON-ready summary dict per employee.
    """
    if start_iso:
        start_date = dt.date.fromisoformat(start_iso)
    else:
        start_date = operating_today() - dt.timedelta(days=1)
    end_date = dt.date.fromisoformat(end_iso) if end_iso else start_date

    rows = []
    employees = Employee.objects.filter(is_active=True, is_deleted=False)
    for employee in employees.order_by("employee_id").iterator():
        data = summarize(employee, start_date, end_date).as_dict()
        data["start_date"] = start_date.isoformat()
        data["end_date"] = end_date.isoformat()
        rows.append(data)
    logger.info(
        "Attendance summaries for %s..%s: %d employees",
        start_date,
        end_date,
        len(rows),
    )
    return rows
