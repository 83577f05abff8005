"""Services for class rosters, attendance grids and records."""

from .feed import RosterFeed
from .matrix import AttendanceMatrix
from .records import RecordService
from .roster import RosterService, normalize_member
from .sessions import (
    format_session_date,
    is_session_day,
    parse_session_date,
    period_label,
    record_id_for,
    session_dates,
)

__all__ = [
    "AttendanceMatrix",
    "RecordService",
    "RosterFeed",
    "RosterService",
    "format_session_date",
    "is_session_day",
    "normalize_member",
    "parse_session_date",
    "period_label",
    "record_id_for",
    "session_dates",
]
