"""Per-employee session state machine.

States are evaluated per scheduled shift date:

    NO_SESSION --clock in--> OPEN --clock out--> CLOSED
    CLOSED --clock in--> OVERTIME_OPEN --clock out--> CLOSED

Every (state, event) pair is either a transition or a rejection.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from hris.attendance.exceptions import AlreadyClockedIn
from hris.attendance.exceptions import AttendanceError
from hris.attendance.exceptions import NoOpenSession


class SessionState(enum.Enum):
    NO_SESSION = "no_session"
    OPEN = "open"
    CLOSED = "closed"
    OVERTIME_OPEN = "overtime_open"


class ScanEvent(enum.Enum):
    CLOCK_IN = "clock_in"
    CLOCK_OUT = "clock_out"


class ScanAction(enum.Enum):
    START_SESSION = "start_session"
    START_OVERTIME_SESSION = "start_overtime_session"
    CLOSE_SESSION = "close_session"


@dataclass(frozen=True)
class Transition:
    action: ScanAction
    next_state: SessionState

    @property
    def starts_overtime(self) -> bool:
        return self.action is ScanAction.START_OVERTIME_SESSION


TRANSITIONS: dict[tuple[SessionState, ScanEvent], Transition] = {
    (SessionState.NO_SESSION, ScanEvent.CLOCK_IN): Transition(
        ScanAction.START_SESSION, SessionState.OPEN
    ),
    (SessionState.CLOSED, ScanEvent.CLOCK_IN): Transition(
        ScanAction.START_OVERTIME_SESSION, SessionState.OVERTIME_OPEN
    ),
    (SessionState.OPEN, ScanEvent.CLOCK_OUT): Transition(
        ScanAction.CLOSE_SESSION, SessionState.CLOSED
    ),
    (SessionState.OVERTIME_OPEN, ScanEvent.CLOCK_OUT): Transition(
        ScanAction.CLOSE_SESSION, SessionState.CLOSED
    ),
}

REJECTIONS: dict[tuple[SessionState, ScanEvent], type[AttendanceError]] = {
    (SessionState.OPEN, ScanEvent.CLOCK_IN): AlreadyClockedIn,
    (SessionState.OVERTIME_OPEN, ScanEvent.CLOCK_IN): AlreadyClockedIn,
    (SessionState.NO_SESSION, ScanEvent.CLOCK_OUT): NoOpenSession,
    (SessionState.CLOSED, ScanEvent.CLOCK_OUT): NoOpenSession,
}


def resolve_state(open_session, *, closed_on_shift_date: bool) -> SessionState:
    """Derive the current state from persisted sessions.

    `open_session` is the employee's session without a time-out, if any. Any
    open session blocks a new clock-in, whatever its shift date.
    """
    if open_session is not None:
        if getattr(open_session, "is_overtime_session", False):
            return SessionState.OVERTIME_OPEN
        return SessionState.OPEN
    if closed_on_shift_date:
        return SessionState.CLOSED
    return SessionState.NO_SESSION


def transition(state: SessionState, event: ScanEvent) -> Transition:
    key = (state, event)
    if key in TRANSITIONS:
        return TRANSITIONS[key]
    raise REJECTIONS[key]()
