"""Rejections raised by the clock engine.

Every rejection leaves the database untouched; the caller is expected to let
the user re-scan or move within range.
"""

from __future__ import annotations


class AttendanceError(Exception):
    code = "ATTENDANCE_ERROR"
    status_code = 400
    default_detail = "Attendance request rejected."

    def __init__(self, detail: str | None = None, **extra):
        self.detail = detail or self.default_detail
        self.extra = extra
        super().__init__(self.detail)

    def as_payload(self) -> dict:
        return {"detail": self.detail, "code": self.code, **self.extra}


class UnknownToken(AttendanceError):
    code = "UNKNOWN_TOKEN"
    status_code = 404
    default_detail = "Invalid QR code."


class NoActiveAssignment(AttendanceError):
    code = "NO_ACTIVE_ASSIGNMENT"
    default_detail = "No active project or office assignment found."


class AlreadyClockedIn(AttendanceError):
    code = "ALREADY_CLOCKED_IN"
    status_code = 409
    default_detail = "Already clocked in. Please clock out first."


class OffSiteRejected(AttendanceError):
    code = "OFF_SITE"
    status_code = 403
    default_detail = "You are outside all assigned location geofences."

    def __init__(
        self,
        distance_meters: float | None,
        nearest_location_id: int | None = None,
        nearest_location_name: str = "",
    ):
        self.distance_meters = distance_meters
        self.nearest_location_id = nearest_location_id
        super().__init__(
            None,
            distance_meters=(
                round(distance_meters, 1) if distance_meters is not None else None
            ),
            nearest_location=nearest_location_id,
            nearest_location_name=nearest_location_name,
        )


class NoOpenSession(AttendanceError):
    code = "NO_OPEN_SESSION"
    default_detail = "No open attendance session to clock out of."


class InvalidInterval(AttendanceError):
    code = "INVALID_INTERVAL"
    default_detail = "Clock-out must be after clock-in."


class SessionNotFound(AttendanceError):
    code = "NOT_FOUND"
    status_code = 404
    default_detail = "Attendance session not found."


class InvalidOvertimeDecision(AttendanceError):
    code = "INVALID_OVERTIME_DECISION"
    default_detail = "Overtime decision not allowed for this session."


class InvalidVerificationStatus(AttendanceError):
    code = "INVALID_VERIFICATION_STATUS"
    default_detail = "A session can only be verified against a location."
