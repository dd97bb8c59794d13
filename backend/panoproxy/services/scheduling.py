"""Time arithmetic behind the start, stop, resume and listing routes."""
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple

from panoproxy.constants import (
    DEFAULT_SESSION_DURATION_SECONDS,
    MIN_PAUSE_DURATION_SECONDS,
    START_BASELINE_NOW,
    START_BASELINE_ORIGINAL,
)
from panoproxy.schemas.session import SessionInfo
from panoproxy.utils.serialization import ensure_utc


def compute_start_window(
    session: SessionInfo,
    now: datetime,
    baseline: str = START_BASELINE_ORIGINAL,
) -> Tuple[datetime, datetime]:
    """
    New (start, end) for starting a session right now.

    The end is ``baseline + duration``, duration defaulting to an hour. With
    the "original" baseline this keeps the originally scheduled end; a session
    without a start time falls back to ``now``.

    Args:
        session: Session as returned by Panopto
        now: Current instant
        baseline: "original" or "now"

    Returns:
        Tuple of (start, end) in UTC
    """
    now = ensure_utc(now)
    duration = session.duration if session.duration is not None else DEFAULT_SESSION_DURATION_SECONDS

    if baseline not in (START_BASELINE_ORIGINAL, START_BASELINE_NOW):
        raise ValueError(f"Unknown start baseline: {baseline}")

    if baseline == START_BASELINE_NOW or session.startTime is None:
        base = now
    else:
        base = ensure_utc(session.startTime)

    return now, base + timedelta(seconds=duration)


def compute_stop_window(session: SessionInfo, now: datetime) -> Optional[Tuple[datetime, datetime]]:
    """Keep the session's start and end it now; None when it has no start time."""
    if session.startTime is None:
        return None
    return ensure_utc(session.startTime), ensure_utc(now)


def compute_pause_duration(pause_start_time: datetime, now: datetime) -> int:
    """Whole seconds paused, never less than one."""
    elapsed = (ensure_utc(now) - ensure_utc(pause_start_time)).total_seconds()
    return int(max(MIN_PAUSE_DURATION_SECONDS, elapsed))


def filter_sessions_on_day(sessions: List[SessionInfo], day: date) -> List[SessionInfo]:
    """Sessions whose UTC start date is ``day``."""
    return [
        session for session in sessions
        if session.startTime is not None and ensure_utc(session.startTime).date() == day
    ]
