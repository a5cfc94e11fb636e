from __future__ import annotations

import datetime as dt
import itertools
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group

from hris.employees.models import Employee
from hris.locations.models import Location
from hris.locations.models import LocationAssignment

if TYPE_CHECKING:
    from collections.abc import Iterable

User = get_user_model()

MANILA = ZoneInfo("Asia/Manila")
# Rizal Park, Manila
HQ_LAT = Decimal("14.5826000")
HQ_LNG = Decimal("120.9787000")
LONG_AGO = dt.date(2020, 1, 1)

_sequence = itertools.count(1)


@dataclass
class RoleContext:
    user: User
    employee: Employee


def manila(year, month, day, hour=0, minute=0, second=0) -> dt.datetime:
    return dt.datetime(year, month, day, hour, minute, second, tzinfo=MANILA)


def ensure_groups(names: Iterable[str]) -> None:
    for name in names:
        Group.objects.get_or_create(name=name)


def make_employee(**kwargs) -> Employee:
    n = next(_sequence)
    kwargs.setdefault("employee_id", f"EMP-{n:04d}")
    kwargs.setdefault("first_name", "Juan")
    kwargs.setdefault("last_name", f"Dela Cruz {n}")
    kwargs.setdefault("scan_token", f"token-{n:04d}")
    return Employee.objects.create(**kwargs)


def create_user_with_role(
    username: str,
    *,
    groups: Iterable[str] | None = None,
    is_staff: bool = False,
    **employee_kwargs,
) -> RoleContext:
    ensure_groups(groups or [])
    user = User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password="TestPass123!",  # noqa: S106
    )
    if is_staff:
        user.is_staff = True
        user.save(update_fields=["is_staff"])
    for group_name in groups or []:
        user.groups.add(Group.objects.get(name=group_name))
    employee = make_employee(user=user, **employee_kwargs)
    return RoleContext(user=user, employee=employee)


def make_location(
    code: str | None = None,
    *,
    latitude=HQ_LAT,
    longitude=HQ_LNG,
    geo_radius: int = 100,
    is_office: bool = True,
    **kwargs,
) -> Location:
    code = code or f"LOC-{next(_sequence):04d}"
    kwargs.setdefault("name", f"Site {code}")
    return Location.objects.create(
        code=code,
        latitude=latitude,
        longitude=longitude,
        geo_radius=geo_radius,
        is_office=is_office,
        **kwargs,
    )


def assign(
    employee: Employee,
    location: Location,
    *,
    assigned_date: dt.date = LONG_AGO,
    end_date: dt.date | None = None,
    is_active: bool = True,
) -> LocationAssignment:
    return LocationAssignment.objects.create(
        employee=employee,
        location=location,
        assigned_date=assigned_date,
        end_date=end_date,
        is_active=is_active,
    )


def offset_north(latitude, meters: float) -> float:
    """Latitude `meters` due north of `latitude` on the haversine sphere."""
    # One degree of latitude is R * pi / 180 meters on a sphere.
    return float(latitude) + meters / 111_194.92664455873
