"""CSV projection of report rows."""

from __future__ import annotations

from typing import Any, Iterable

from classroll.classes.utils import display_name
from classroll.core.constants import CSV_MEMBER_SEPARATOR


def _is_member_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, dict) for v in value)


def _cell(value: Any) -> str:
    if value is None:
        text = ""
    elif _is_member_list(value):
        text = CSV_MEMBER_SEPARATOR.join(display_name(m) for m in value)
    else:
        text = str(value)
    return '"' + text.replace('"', '""') + '"'


def to_csv(rows: Iterable[dict[str, Any]]) -> str:
    """Render rows as CSV text.

    The header is the keys of the first row. Every cell is double-quoted, and
    a list of member objects becomes their names joined with ``"; "``.
    """
    rows = list(rows)
    if not rows:
        return ""
    headers = list(rows[0].keys())
    lines = [",".join(headers)]
    lines.extend(",".join(_cell(row.get(h)) for h in headers) for row in rows)
    return "\n".join(lines)


def report_filename(year: int, month: int | None = None) -> str:
    """Download name for a monthly or yearly report."""
    if month is None:
        return f"attendance-{year}.csv"
    return f"attendance-{year}-{month}.csv"
