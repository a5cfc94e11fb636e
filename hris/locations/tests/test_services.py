import datetime as dt

import pytest

from hris.locations.services import active_locations_for
from tests.factories import assign
from tests.factories import make_employee
from tests.factories import make_location

ON = dt.date(2026, 3, 2)


@pytest.mark.django_db
def test_offices_come_before_projects():
    emp = make_employee()
    project = make_location("A-PROJECT", is_office=False)
    office = make_location("Z-OFFICE", is_office=True)
    assign(emp, project)
    assign(emp, office)
    assert active_locations_for(emp, ON) == [office, project]


@pytest.mark.django_db
def test_assignment_window_is_inclusive():
    emp = make_employee()
    site = make_location("SITE")
    assign(emp, site, assigned_date=ON, end_date=ON)
    assert active_locations_for(emp, ON) == [site]
    assert active_locations_for(emp, ON + dt.timedelta(days=1)) == []
    assert active_locations_for(emp, ON - dt.timedelta(days=1)) == []


@pytest.mark.django_db
def test_conditions_apply_to_the_same_assignment():
    emp = make_employee()
    site = make_location("SITE")
    # One ended assignment and one that has not started yet: neither is
    # active today even though each passes half the conditions.
    assign(emp, site, end_date=ON - dt.timedelta(days=1))
    assign(emp, site, assigned_date=ON + dt.timedelta(days=1))
    assert active_locations_for(emp, ON) == []


@pytest.mark.django_db
def test_inactive_assignments_and_other_employees_are_ignored():
    emp = make_employee()
    other = make_employee()
    site = make_location("SITE")
    assign(emp, site, is_active=False)
    assign(other, site)
    assert active_locations_for(emp, ON) == []


@pytest.mark.django_db
def test_duplicate_assignments_list_location_once():
    emp = make_employee()
    site = make_location("SITE")
    assign(emp, site)
    assign(emp, site)
    assert active_locations_for(emp, ON) == [site]
