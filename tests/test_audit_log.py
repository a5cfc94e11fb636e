from __future__ import annotations

import pytest
from django.contrib.auth.models import AnonymousUser

from hris.audit.models import AuditLog
from hris.audit.utils import log_action
from hris.audit.utils import log_action_on_commit
from tests.factories import create_user_with_role


@pytest.mark.django_db
def test_log_action_records_actor():
    user = create_user_with_role("auditor").user
    log_action(
        "attendance.verification",
        actor=user,
        message="Pending -> Flagged",
        model_name="AttendanceSession",
        record_id=7,
        payload={"status": "Flagged"},
    )
    row = AuditLog.objects.get()
    assert row.actor == user
    assert row.record_id == 7
    assert row.payload == {"status": "Flagged"}


@pytest.mark.django_db
def test_non_user_actor_is_stored_as_system():
    log_action("attendance.clock_in", actor=AnonymousUser())
    assert AuditLog.objects.get().actor is None


@pytest.mark.django_db
def test_on_commit_delivery_waits_for_commit(django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks() as callbacks:
        log_action_on_commit("attendance.clock_in", record_id=1)
        assert not AuditLog.objects.exists()
    assert len(callbacks) == 1
    callbacks[0]()
    assert AuditLog.objects.get().action == "attendance.clock_in"
