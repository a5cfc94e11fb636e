from __future__ import annotations

import datetime as dt

from django.db import models

from hris.locations.models import Location


def active_locations_for(employee, on_date: dt.date) -> list[Location]:
    """Locations the employee is actively assigned to on `on_date`.

    Offices are listed first so a permanent site wins when geofences overlap.
    """

    # One filter() call so every condition applies to the same assignment row.
    qs = (
        Location.objects.filter(
            models.Q(assignments__end_date__isnull=True)
            | models.Q(assignments__end_date__gte=on_date),
            is_active=True,
            assignments__employee=employee,
            assignments__is_active=True,
            assignments__assigned_date__lte=on_date,
        )
        .distinct()
        .order_by("-is_office", "code")
    )
    return list(qs)
