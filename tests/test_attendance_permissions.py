from rest_framework import status

from tests.mixins import ROLE_ADMIN
from tests.mixins import ROLE_EMPLOYEE
from tests.mixins import ROLE_HR
from tests.mixins import RoleAPITestCase


class AttendancePermissionTests(RoleAPITestCase):
    def test_employee_only_lists_own_sessions(self):
        response = self.get("api_v1:attendance-list", role=ROLE_EMPLOYEE)
        self.assert_http_status(response, status.HTTP_200_OK)
        ids = {row["id"] for row in self.extract_results(response)}
        assert ids == {self.sessions["own"].pk}

    def test_hr_and_admin_list_all_sessions(self):
        for role in (ROLE_HR, ROLE_ADMIN):
            response = self.get("api_v1:attendance-list", role=role)
            self.assert_http_status(response, status.HTTP_200_OK)
            ids = {row["id"] for row in self.extract_results(response)}
            assert ids == {s.pk for s in self.sessions.values()}

    def test_employee_cannot_retrieve_other_session(self):
        response = self.get(
            "api_v1:attendance-detail",
            role=ROLE_EMPLOYEE,
            reverse_kwargs={"pk": self.sessions["other"].pk},
        )
        self.assert_denied(response, status.HTTP_404_NOT_FOUND)

    def test_admin_actions_are_denied_to_employees(self):
        target = {"pk": self.sessions["own"].pk}
        for url_name, payload in (
            ("api_v1:attendance-verify", {"status": "Flagged"}),
            ("api_v1:attendance-overtime", {"approve": True}),
        ):
            response = self.post(
                url_name, role=ROLE_EMPLOYEE, payload=payload, reverse_kwargs=target
            )
            self.assert_denied(response)
        response = self.post(
            "api_v1:attendance-manual-entry",
            role=ROLE_EMPLOYEE,
            payload={
                "employee": self.roles[ROLE_EMPLOYEE].employee.pk,
                "time_in": "2026-03-03T08:00:00+08:00",
            },
        )
        self.assert_denied(response)

    def test_hr_can_approve_overtime(self):
        response = self.post(
            "api_v1:attendance-overtime",
            role=ROLE_HR,
            payload={"approve": True},
            reverse_kwargs={"pk": self.sessions["other"].pk},
        )
        self.assert_allowed(response)
        assert response.data["ot_status"] == "Approved"

    def test_admin_can_reflag(self):
        response = self.post(
            "api_v1:attendance-verify",
            role=ROLE_ADMIN,
            payload={"status": "Flagged", "notes": "Second opinion"},
            reverse_kwargs={"pk": self.sessions["own"].pk},
        )
        self.assert_allowed(response)
        assert response.data["verification_status"] == "Flagged"

    def test_owner_may_justify_but_not_others(self):
        allowed = self.post(
            "api_v1:attendance-justification",
            role=ROLE_EMPLOYEE,
            payload={"justification": "Inventory count"},
            reverse_kwargs={"pk": self.sessions["own"].pk},
        )
        self.assert_allowed(allowed)
        denied = self.post(
            "api_v1:attendance-justification",
            role=ROLE_EMPLOYEE,
            payload={"justification": "Not mine"},
            reverse_kwargs={"pk": self.sessions["other"].pk},
        )
        self.assert_denied(denied, status.HTTP_404_NOT_FOUND)

    def test_hr_may_justify_any_session(self):
        response = self.post(
            "api_v1:attendance-justification",
            role=ROLE_HR,
            payload={"justification": "Recorded on behalf"},
            reverse_kwargs={"pk": self.sessions["other"].pk},
        )
        self.assert_allowed(response)
