import pytest

from hris.employees.models import Employee
from hris.employees.services import get_by_scan_token
from hris.employees.services import issue_scan_token
from hris.employees.services import soft_delete_employee
from tests.factories import make_employee


@pytest.mark.django_db
def test_token_resolves_to_employee():
    emp = make_employee(scan_token="abc123")
    assert get_by_scan_token("abc123") == emp


@pytest.mark.django_db
def test_blank_or_unknown_token():
    make_employee(scan_token="abc123")
    assert get_by_scan_token("") is None
    assert get_by_scan_token("zzz") is None


@pytest.mark.django_db
def test_reissuing_invalidates_old_badge():
    emp = make_employee()
    old = emp.scan_token
    new = issue_scan_token(emp)
    assert len(new) == 32
    assert new != old
    assert get_by_scan_token(old) is None
    assert get_by_scan_token(new) == emp


@pytest.mark.django_db
def test_soft_delete_clears_token():
    emp = make_employee(scan_token="abc123")
    soft_delete_employee(emp)
    emp.refresh_from_db()
    assert emp.is_deleted
    assert not emp.is_active
    assert emp.deleted_at is not None
    assert emp.scan_token is None
    assert get_by_scan_token("abc123") is None
    assert Employee.objects.filter(pk=emp.pk).exists()


@pytest.mark.django_db
def test_inactive_employee_token_does_not_resolve():
    make_employee(scan_token="abc123", is_active=False)
    assert get_by_scan_token("abc123") is None
