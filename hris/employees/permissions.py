"""Role helpers shared by the attendance API."""

from collections.abc import Iterable

from rest_framework.permissions import BasePermission

ROLE_ADMIN = "Admin"
ROLE_HR = "HR"


def _user_in_groups(user, names: Iterable[str]) -> bool:
    groups = getattr(user, "groups", None)
    names_list = list(names)
    if not groups or not names_list:
        return False
    return groups.filter(name__in=names_list).exists()


def is_admin_or_hr(user) -> bool:
    if not (user and getattr(user, "is_authenticated", False)):
        return False
    if getattr(user, "is_staff", False):
        return True
    return _user_in_groups(user, [ROLE_ADMIN, ROLE_HR])


class IsAdminOrHR(BasePermission):
    def has_permission(self, request, view) -> bool:
        return is_admin_or_hr(getattr(request, "user", None))
