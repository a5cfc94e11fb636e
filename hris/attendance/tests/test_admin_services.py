import datetime as dt

import pytest

from hris.attendance import services
from hris.attendance.exceptions import AlreadyClockedIn
from hris.attendance.exceptions import InvalidInterval
from hris.attendance.exceptions import InvalidOvertimeDecision
from hris.attendance.exceptions import InvalidVerificationStatus
from hris.attendance.models import AttendanceSession
from hris.attendance.models import AttendanceVerification
from hris.attendance.models import OvertimeStatus
from hris.attendance.models import VerificationStatus
from hris.attendance.shifts import ShiftType
from tests.factories import HQ_LAT
from tests.factories import HQ_LNG
from tests.factories import assign
from tests.factories import create_user_with_role
from tests.factories import make_employee
from tests.factories import make_location
from tests.factories import manila

MONDAY = dt.date(2026, 3, 2)


def at(hour, minute=0, day=MONDAY):
    return manila(day.year, day.month, day.day, hour, minute)


@pytest.fixture
def hr():
    return create_user_with_role("hr", groups=["HR"]).user


@pytest.fixture
def employee():
    return make_employee()


@pytest.fixture
def office(employee):
    location = make_location("HQ")
    assign(employee, location)
    return location


@pytest.mark.django_db
class TestManualEntry:
    def test_open_off_site_entry_bypasses_geofence(self, employee, hr):
        session = services.record_manual_entry(
            employee,
            at(8),
            verification_status=VerificationStatus.OFF_SITE,
            notes="Field work, phone had no signal",
            actor=hr,
        )
        assert session.verification_status == VerificationStatus.OFF_SITE
        assert session.location is None
        assert session.time_out is None
        assert session.scheduled_shift_date == MONDAY
        assert session.admin_notes == "Field work, phone had no signal"

        trail = AttendanceVerification.objects.get(session=session)
        assert trail.status == VerificationStatus.OFF_SITE
        assert trail.verified_by == hr

    def test_closed_entry_is_accounted(self, employee, office, hr):
        session = services.record_manual_entry(
            employee,
            at(8, 30),
            at(18, 30),
            location=office,
            verification_status=VerificationStatus.VERIFIED,
            actor=hr,
        )
        assert session.late_minutes == 30
        assert session.late_deductible is True
        assert session.total_working_minutes == 540
        assert session.overtime_minutes == 60
        assert session.ot_status == OvertimeStatus.PENDING

    def test_night_entry_is_classified(self, employee, hr):
        session = services.record_manual_entry(
            employee, at(1, day=MONDAY + dt.timedelta(days=1)), actor=hr
        )
        assert session.actual_shift_type == ShiftType.NIGHT
        assert session.scheduled_shift_date == MONDAY

    def test_verified_entry_requires_location(self, employee, hr):
        with pytest.raises(InvalidVerificationStatus):
            services.record_manual_entry(
                employee,
                at(8),
                verification_status=VerificationStatus.VERIFIED,
                actor=hr,
            )

    def test_single_open_session_still_applies(self, employee, office, hr):
        services.clock_in(
            employee.scan_token, float(HQ_LAT), float(HQ_LNG), now=at(8)
        )
        with pytest.raises(AlreadyClockedIn):
            services.record_manual_entry(employee, at(9), actor=hr)

    def test_entry_after_closed_session_is_overtime(self, employee, office, hr):
        services.clock_in(
            employee.scan_token, float(HQ_LAT), float(HQ_LNG), now=at(8)
        )
        services.clock_out(employee.pk, now=at(17))

        session = services.record_manual_entry(employee, at(18), at(21), actor=hr)
        assert session.is_overtime_session
        assert session.overtime_minutes == 180

    def test_invalid_interval(self, employee, hr):
        with pytest.raises(InvalidInterval):
            services.record_manual_entry(employee, at(9), at(8), actor=hr)


@pytest.mark.django_db
class TestVerificationStatus:
    def test_reflag_keeps_trail(self, employee, office, hr):
        session = services.clock_in(
            employee.scan_token, float(HQ_LAT), float(HQ_LNG), now=at(8)
        )
        services.set_verification_status(
            session, VerificationStatus.FLAGGED, actor=hr, notes="Badge shared"
        )
        session.refresh_from_db()
        assert session.verification_status == VerificationStatus.FLAGGED
        assert session.admin_notes == "Badge shared"

        trail = session.verifications.get()
        assert trail.previous_status == VerificationStatus.VERIFIED
        assert trail.status == VerificationStatus.FLAGGED

    def test_stale_instance_records_the_replaced_status(self, employee, office, hr):
        session = services.clock_in(
            employee.scan_token, float(HQ_LAT), float(HQ_LNG), now=at(8)
        )
        first = AttendanceSession.objects.get(pk=session.pk)
        second = AttendanceSession.objects.get(pk=session.pk)

        services.set_verification_status(first, VerificationStatus.FLAGGED, actor=hr)
        result = services.set_verification_status(
            second, VerificationStatus.OFF_SITE, actor=hr
        )

        assert result.verification_status == VerificationStatus.OFF_SITE
        latest = session.verifications.order_by("-pk").first()
        assert latest.previous_status == VerificationStatus.FLAGGED

    def test_cannot_verify_without_location(self, employee, hr):
        session = services.record_manual_entry(employee, at(8), actor=hr)
        with pytest.raises(InvalidVerificationStatus):
            services.set_verification_status(
                session, VerificationStatus.VERIFIED, actor=hr
            )

    def test_unknown_status(self, employee, hr):
        session = services.record_manual_entry(employee, at(8), actor=hr)
        with pytest.raises(InvalidVerificationStatus):
            services.set_verification_status(session, "Teleported", actor=hr)


@pytest.mark.django_db
class TestOvertimeDecision:
    @pytest.fixture
    def overtime_session(self, employee, office, hr):
        return services.record_manual_entry(
            employee,
            at(8),
            at(20),
            location=office,
            verification_status=VerificationStatus.VERIFIED,
            actor=hr,
        )

    def test_approve(self, overtime_session, hr):
        services.decide_overtime(overtime_session, True, actor=hr)
        overtime_session.refresh_from_db()
        assert overtime_session.ot_status == OvertimeStatus.APPROVED
        assert overtime_session.payable_overtime_minutes == 180

    def test_reject(self, overtime_session, hr):
        services.decide_overtime(overtime_session, False, actor=hr, notes="No OT")
        overtime_session.refresh_from_db()
        assert overtime_session.ot_status == OvertimeStatus.REJECTED
        assert overtime_session.payable_overtime_minutes == 0

    def test_decision_is_final(self, overtime_session, hr):
        services.decide_overtime(overtime_session, True, actor=hr)
        with pytest.raises(InvalidOvertimeDecision):
            services.decide_overtime(overtime_session, False, actor=hr)

    def test_decision_from_stale_instance_is_rejected(self, overtime_session, hr):
        first = AttendanceSession.objects.get(pk=overtime_session.pk)
        second = AttendanceSession.objects.get(pk=overtime_session.pk)

        services.decide_overtime(first, True, actor=hr)
        with pytest.raises(InvalidOvertimeDecision):
            services.decide_overtime(second, False, actor=hr)

        overtime_session.refresh_from_db()
        assert overtime_session.ot_status == OvertimeStatus.APPROVED

    def test_session_without_overtime(self, employee, hr):
        session = services.record_manual_entry(employee, at(8), at(17), actor=hr)
        assert session.ot_status is None
        with pytest.raises(InvalidOvertimeDecision):
            services.decide_overtime(session, True, actor=hr)
