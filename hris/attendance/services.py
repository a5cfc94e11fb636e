"""Clock engine: the only writers of attendance sessions.

Every operation here is all-or-nothing. Rejections raise an
``AttendanceError`` subclass and leave the database as it was.
"""

from __future__ import annotations

import datetime as dt
import functools
import logging
from decimal import ROUND_HALF_UP
from decimal import Decimal

from django.db import IntegrityError
from django.db import transaction
from django.utils import timezone

from hris.attendance.accounting import TimeBreakdown
from hris.attendance.accounting import account
from hris.attendance.accounting import scheduled_minutes_for
from hris.attendance.exceptions import AlreadyClockedIn
from hris.attendance.exceptions import AttendanceError
from hris.attendance.exceptions import InvalidOvertimeDecision
from hris.attendance.exceptions import InvalidVerificationStatus
from hris.attendance.exceptions import NoActiveAssignment
from hris.attendance.exceptions import OffSiteRejected
from hris.attendance.exceptions import SessionNotFound
from hris.attendance.exceptions import UnknownToken
from hris.attendance.geofence import GeofenceMatch
from hris.attendance.geofence import match_location
from hris.attendance.models import COORDINATE_QUANTUM
from hris.attendance.models import AttendanceSession
from hris.attendance.models import AttendanceVerification
from hris.attendance.models import OvertimeStatus
from hris.attendance.models import VerificationStatus
from hris.attendance.sessions import ScanEvent
from hris.attendance.sessions import SessionState
from hris.attendance.sessions import resolve_state
from hris.attendance.sessions import transition
from hris.attendance.shifts import ShiftWindow
from hris.attendance.shifts import classify
from hris.attendance.shifts import to_operating_time
from hris.audit.utils import log_action_on_commit
from hris.employees.models import Employee
from hris.employees.services import get_by_scan_token
from hris.locations.services import active_locations_for
from hris.policies import default_geofence_radius_meters
from hris.policies import grace_minutes
from hris.policies import lunch_deduction_minutes
from hris.policies import lunch_threshold_minutes
from hris.policies import overtime_session_scheduled_minutes

logger = logging.getLogger(__name__)

ACCURACY_QUANTUM = Decimal("0.01")


def _logs_rejections(operation: str):
    """Log every engine rejection with its code before re-raising it."""

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except AttendanceError as exc:
                logger.info("%s rejected: %s", operation, exc.code)
                raise

        return wrapper

    return decorator


def _quantize(value, quantum: Decimal = COORDINATE_QUANTUM) -> Decimal | None:
    if value is None:
        return None
    return Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)


def _scan_time(now: dt.datetime | None) -> dt.datetime:
    return to_operating_time(now or timezone.now())


def _open_session_for(employee_id: int) -> AttendanceSession | None:
    return (
        AttendanceSession.objects.filter(
            employee_id=employee_id, time_out__isnull=True
        )
        .order_by("-time_in")
        .first()
    )


def _current_state(employee_id: int, shift_date: dt.date) -> SessionState:
    closed_on_shift_date = AttendanceSession.objects.filter(
        employee_id=employee_id,
        scheduled_shift_date=shift_date,
        time_out__isnull=False,
    ).exists()
    return resolve_state(
        _open_session_for(employee_id),
        closed_on_shift_date=closed_on_shift_date,
    )


def _lock_employee(employee_id: int) -> Employee:
    return Employee.objects.select_for_update().get(pk=employee_id)


def _lock_session(session_id: int) -> AttendanceSession:
    return AttendanceSession.objects.select_for_update().get(pk=session_id)


def _apply_breakdown(session: AttendanceSession, time_out: dt.datetime) -> TimeBreakdown:
    """Close `session` at `time_out` and fill its derived minute fields."""
    if session.is_overtime_session:
        shift_start = None
        scheduled = overtime_session_scheduled_minutes()
    else:
        window = ShiftWindow.for_employee(session.employee)
        shift_start = window.start
        scheduled = scheduled_minutes_for(
            window,
            lunch_threshold_minutes=lunch_threshold_minutes(),
            lunch_deduction_minutes=lunch_deduction_minutes(),
        )
    breakdown = account(
        session.time_in,
        time_out,
        shift_start,
        grace_minutes(),
        scheduled_minutes=scheduled,
        lunch_threshold_minutes=lunch_threshold_minutes(),
        lunch_deduction_minutes=lunch_deduction_minutes(),
    )
    session.time_out = time_out
    session.late_minutes = breakdown.late_minutes
    session.late_deductible = breakdown.late_deductible
    session.lunch_deduction_minutes = breakdown.lunch_deduction_minutes
    session.total_working_minutes = breakdown.net_minutes
    session.overtime_minutes = breakdown.overtime_minutes
    session.ot_status = (
        OvertimeStatus.PENDING if breakdown.overtime_minutes > 0 else None
    )
    return breakdown


def _create_session(**fields) -> AttendanceSession:
    # The partial unique index is the last word on "one open session".
    try:
        with transaction.atomic():
            return AttendanceSession.objects.create(**fields)
    except IntegrityError as exc:
        raise AlreadyClockedIn() from exc


@_logs_rejections("Clock-in")
def clock_in(  # noqa: PLR0913
    token: str,
    latitude: float,
    longitude: float,
    accuracy: float | None = None,
    photo: str = "",
    *,
    now: dt.datetime | None = None,
) -> AttendanceSession:
    """Open a session for the employee holding `token`.

    Raises:
        UnknownToken: no live employee holds the token.
        NoActiveAssignment: the employee has no active location today.
        AlreadyClockedIn: the employee already has an open session.
        OffSiteRejected: the scan is outside every assigned geofence.
    """
    scanned_at = _scan_time(now)
    employee = get_by_scan_token(token)
    if employee is None:
        raise UnknownToken()

    locations = active_locations_for(employee, scanned_at.date())
    if not locations:
        raise NoActiveAssignment(employee=employee.pk)

    shift = classify(scanned_at)
    with transaction.atomic():
        _lock_employee(employee.pk)
        step = transition(
            _current_state(employee.pk, shift.scheduled_shift_date),
            ScanEvent.CLOCK_IN,
        )

        match = match_location(
            latitude,
            longitude,
            locations,
            default_radius_meters=default_geofence_radius_meters(),
        )
        if not match.matched:
            raise OffSiteRejected(
                match.nearest_distance_meters,
                nearest_location_id=getattr(match.nearest, "pk", None),
                nearest_location_name=getattr(match.nearest, "name", ""),
            )

        session = _create_session(
            employee=employee,
            location=match.location,
            time_in=scanned_at,
            time_in_latitude=_quantize(latitude),
            time_in_longitude=_quantize(longitude),
            time_in_accuracy=_quantize(accuracy, ACCURACY_QUANTUM),
            time_in_photo=photo or "",
            verification_status=VerificationStatus.VERIFIED,
            scheduled_shift_date=shift.scheduled_shift_date,
            actual_shift_type=shift.shift_type,
            is_overtime_session=step.starts_overtime,
        )
        log_action_on_commit(
            "attendance.clock_in",
            message=f"Clock-in for employee {employee.employee_id}",
            model_name="AttendanceSession",
            record_id=session.pk,
            payload={
                "employee": employee.pk,
                "location": match.location.pk,
                "shift_type": shift.shift_type,
                "scheduled_shift_date": shift.scheduled_shift_date.isoformat(),
                "is_overtime_session": session.is_overtime_session,
            },
        )

    logger.info(
        "Clock-in accepted: employee=%s session=%s location=%s overtime=%s",
        employee.pk,
        session.pk,
        match.location.pk,
        session.is_overtime_session,
    )
    return session


@_logs_rejections("Clock-out")
def clock_out(  # noqa: PLR0913
    employee_id: int,
    latitude: float | None = None,
    longitude: float | None = None,
    accuracy: float | None = None,
    photo: str = "",
    *,
    now: dt.datetime | None = None,
) -> AttendanceSession:
    """Close the employee's open session and account its minutes.

    Clock-out is not geofence-checked and keeps the time-in verification.

    Raises:
        NoOpenSession: nothing to close.
        InvalidInterval: the scan is not after the time-in.
    """
    scanned_at = _scan_time(now)
    with transaction.atomic():
        session = (
            AttendanceSession.objects.select_for_update()
            .select_related("employee")
            .filter(employee_id=employee_id, time_out__isnull=True)
            .order_by("-time_in")
            .first()
        )
        transition(
            resolve_state(session, closed_on_shift_date=False),
            ScanEvent.CLOCK_OUT,
        )

        breakdown = _apply_breakdown(session, scanned_at)
        session.time_out_latitude = _quantize(latitude)
        session.time_out_longitude = _quantize(longitude)
        session.time_out_accuracy = _quantize(accuracy, ACCURACY_QUANTUM)
        session.time_out_photo = photo or ""
        session.save()
        log_action_on_commit(
            "attendance.clock_out",
            message=f"Clock-out for employee {session.employee.employee_id}",
            model_name="AttendanceSession",
            record_id=session.pk,
            payload={"employee": session.employee_id, **breakdown.as_dict()},
        )

    logger.info(
        "Clock-out accepted: employee=%s session=%s net=%s overtime=%s",
        employee_id,
        session.pk,
        breakdown.net_minutes,
        breakdown.overtime_minutes,
    )
    return session


def submit_justification(session_id: int, text: str) -> AttendanceSession:
    """Attach the employee's explanation to a session.

    Raises:
        SessionNotFound: no session with that id.
    """
    with transaction.atomic():
        session = (
            AttendanceSession.objects.select_for_update()
            .filter(pk=session_id)
            .first()
        )
        if session is None:
            raise SessionNotFound(session=session_id)
        session.justification = text
        session.save(update_fields=["justification", "updated_at"])
        log_action_on_commit(
            "attendance.justification",
            message="Justification submitted",
            model_name="AttendanceSession",
            record_id=session.pk,
            payload={"employee": session.employee_id},
        )
    return session


def geofence_diagnostics(
    token: str,
    latitude: float,
    longitude: float,
    *,
    now: dt.datetime | None = None,
) -> GeofenceMatch:
    """Evaluate a scan against the employee's locations without recording it."""
    employee = get_by_scan_token(token)
    if employee is None:
        raise UnknownToken()
    locations = active_locations_for(employee, _scan_time(now).date())
    if not locations:
        raise NoActiveAssignment(employee=employee.pk)
    return match_location(
        latitude,
        longitude,
        locations,
        default_radius_meters=default_geofence_radius_meters(),
    )


# Administrative overrides. These bypass the geofence but not the
# single-open-session rule.


def _record_verification(session, status, previous_status, actor, notes):
    return AttendanceVerification.objects.create(
        session=session,
        status=status,
        previous_status=previous_status or "",
        verified_by=actor if getattr(actor, "is_authenticated", False) else None,
        notes=notes or "",
    )


def record_manual_entry(  # noqa: PLR0913
    employee: Employee,
    time_in: dt.datetime,
    time_out: dt.datetime | None = None,
    *,
    location=None,
    verification_status: str = VerificationStatus.PENDING,
    notes: str = "",
    actor=None,
) -> AttendanceSession:
    """Create a session on an employee's behalf without a geofence check."""
    if verification_status == VerificationStatus.VERIFIED and location is None:
        raise InvalidVerificationStatus()

    time_in = to_operating_time(time_in)
    shift = classify(time_in)
    with transaction.atomic():
        _lock_employee(employee.pk)
        step = transition(
            _current_state(employee.pk, shift.scheduled_shift_date),
            ScanEvent.CLOCK_IN,
        )
        session = AttendanceSession(
            employee=employee,
            location=location,
            time_in=time_in,
            verification_status=verification_status,
            scheduled_shift_date=shift.scheduled_shift_date,
            actual_shift_type=shift.shift_type,
            is_overtime_session=step.starts_overtime,
            admin_notes=notes or "",
        )
        if time_out is not None:
            _apply_breakdown(session, to_operating_time(time_out))
        try:
            with transaction.atomic():
                session.save()
        except IntegrityError as exc:
            raise AlreadyClockedIn() from exc
        _record_verification(session, verification_status, "", actor, notes)
        log_action_on_commit(
            "attendance.manual_entry",
            actor=actor,
            message=f"Manual entry for employee {employee.employee_id}",
            model_name="AttendanceSession",
            record_id=session.pk,
            payload={
                "employee": employee.pk,
                "verification_status": verification_status,
                "closed": time_out is not None,
            },
        )

    logger.warning(
        "Manual attendance entry: employee=%s session=%s status=%s by=%s",
        employee.pk,
        session.pk,
        verification_status,
        getattr(actor, "pk", None),
    )
    return session


def set_verification_status(
    session: AttendanceSession,
    status: str,
    *,
    actor=None,
    notes: str = "",
) -> AttendanceSession:
    """Re-flag a session and keep a trail of who changed it.

    The status change is decided on a freshly locked row, so the trail's
    previous status is the one actually replaced.
    """
    if status not in VerificationStatus.values:
        raise InvalidVerificationStatus(f"Unknown verification status: {status}.")

    with transaction.atomic():
        session = _lock_session(session.pk)
        if status == VerificationStatus.VERIFIED and session.location_id is None:
            raise InvalidVerificationStatus()
        previous = session.verification_status
        session.verification_status = status
        update_fields = ["verification_status", "updated_at"]
        if notes:
            session.admin_notes = notes
            update_fields.append("admin_notes")
        session.save(update_fields=update_fields)
        _record_verification(session, status, previous, actor, notes)
        log_action_on_commit(
            "attendance.verification",
            actor=actor,
            message=f"Verification {previous} -> {status}",
            model_name="AttendanceSession",
            record_id=session.pk,
            payload={"previous": previous, "status": status},
        )

    logger.warning(
        "Attendance re-flagged: session=%s %s -> %s by=%s",
        session.pk,
        previous,
        status,
        getattr(actor, "pk", None),
    )
    return session


def decide_overtime(
    session: AttendanceSession,
    approve: bool,
    *,
    actor=None,
    notes: str = "",
) -> AttendanceSession:
    """Approve or reject a session's pending overtime.

    A decision is final: the pending check runs on the locked row, so a
    second decision built from the same read is rejected.
    """
    decision = OvertimeStatus.APPROVED if approve else OvertimeStatus.REJECTED
    with transaction.atomic():
        session = _lock_session(session.pk)
        if session.ot_status != OvertimeStatus.PENDING:
            raise InvalidOvertimeDecision(ot_status=session.ot_status)
        session.ot_status = decision
        update_fields = ["ot_status", "updated_at"]
        if notes:
            session.admin_notes = notes
            update_fields.append("admin_notes")
        session.save(update_fields=update_fields)
        log_action_on_commit(
            "attendance.overtime_decision",
            actor=actor,
            message=f"Overtime {decision.lower()}",
            model_name="AttendanceSession",
            record_id=session.pk,
            payload={
                "overtime_minutes": session.overtime_minutes,
                "ot_status": decision,
            },
        )

    logger.warning(
        "Overtime %s: session=%s minutes=%s by=%s",
        decision,
        session.pk,
        session.overtime_minutes,
        getattr(actor, "pk", None),
    )
    return session
