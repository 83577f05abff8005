from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import Response, jsonify, request

from classroll.auth.decorators import role_required
from classroll.core.constants import MAX_YEAR, MIN_YEAR, ROLE_ADMIN
from classroll.utils import parse_int

from . import bp
from .exports import report_filename, to_csv
from .services import ReportService


def _period_args() -> tuple[int, int | None]:
    year = parse_int(request.args.get("year"), "year", MIN_YEAR, MAX_YEAR)
    month = request.args.get("month")
    if month in (None, ""):
        return year, None
    return year, parse_int(month, "month", 1, 12)


def _fetch_period() -> tuple[int, int | None, list[dict[str, Any]]]:
    year, month = _period_args()
    db = firestore.client()
    return year, month, ReportService.query_by_period(db, year, month)


@bp.route("/", methods=["GET"])
@role_required(ROLE_ADMIN)
def period_report() -> Any:
    """Rows and trend for ``?year=`` and an optional ``&month=``."""
    year, month, snapshots = _fetch_period()
    return jsonify(
        {
            "year": year,
            "month": month,
            "count": len(snapshots),
            "rows": ReportService.report_rows(snapshots),
            "series": ReportService.to_series(snapshots),
            "overall": ReportService.overall_rate(snapshots).to_dict(),
        }
    )


@bp.route("/csv", methods=["GET"])
@role_required(ROLE_ADMIN)
def period_report_csv() -> Any:
    """Download the period report as CSV."""
    year, month, snapshots = _fetch_period()
    content = to_csv(ReportService.report_rows(snapshots))
    return Response(
        content,
        mimetype="text/csv",
        headers={
            "Content-Disposition": (
                f"attachment; filename={report_filename(year, month)}"
            )
        },
    )


@bp.route("/dashboard", methods=["GET"])
@role_required(ROLE_ADMIN)
def dashboard() -> Any:
    """Per-class summaries and the overall rate, filtered by ``?type=``."""
    year, month, snapshots = _fetch_period()
    summary = ReportService.dashboard(snapshots, request.args.get("type"))
    return jsonify({"year": year, "month": month, **summary})
