"""Routes for the classes blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import current_app, jsonify, request

from classroll.auth.decorators import current_auth, role_required
from classroll.core.constants import (
    MAX_YEAR,
    MIN_YEAR,
    ROLE_ADMIN,
    ROLE_TEACHER,
)
from classroll.errors import ValidationError
from classroll.reports import services as report_services
from classroll.utils import parse_int

from . import bp
from .forms import GroupForm, MemberForm
from .services import (
    AttendanceMatrix,
    RecordService,
    RosterService,
    format_session_date,
    normalize_member,
    session_dates,
)
from .utils import lookup_keys


def _form_data(form: Any) -> dict[str, Any]:
    """Validate a form, raising with its first error per field."""
    if not form.validate_on_submit():
        messages = [
            f"{field}: {errors[0]}" for field, errors in form.errors.items() if errors
        ]
        raise ValidationError("; ".join(messages) or "Invalid request.")
    return {k: v for k, v in form.data.items() if k != "csrf_token"}


def _json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object.")
    return data


def _period(source: Any) -> tuple[int, int]:
    year = parse_int(source.get("year"), "year", MIN_YEAR, MAX_YEAR)
    month = parse_int(source.get("month"), "month", 1, 12)
    return year, month


def _calendar(year: int, month: int) -> list:
    return session_dates(year, month, current_app.config["SESSION_WEEKDAY"])


@bp.route("/", methods=["GET"])
@role_required()
def list_classes():
    """List all classes, optionally filtered by ``?type=``."""
    db = firestore.client()
    groups = RosterService.list_groups(db, request.args.get("type"))
    return jsonify(groups)


@bp.route("/", methods=["POST"])
@role_required(ROLE_ADMIN)
def create_class():
    """Create a class with an empty roster."""
    data = _form_data(GroupForm())
    db = firestore.client()
    group_id = RosterService.create_group(db, data)
    return jsonify({"id": group_id}), 201


@bp.route("/<string:group_id>", methods=["GET"])
@role_required()
def view_class(group_id):
    """Return one class with its roster."""
    db = firestore.client()
    return jsonify(RosterService.get_group(db, group_id))


@bp.route("/<string:group_id>", methods=["PATCH"])
@role_required(ROLE_ADMIN)
def update_class(group_id):
    """Change class metadata."""
    db = firestore.client()
    RosterService.update_group(db, group_id, _json_body())
    return jsonify({"status": "success"})


@bp.route("/<string:group_id>", methods=["DELETE"])
@role_required(ROLE_ADMIN)
def delete_class(group_id):
    """Delete a class. Its attendance records are not removed."""
    db = firestore.client()
    RosterService.delete_group(db, group_id)
    return jsonify({"status": "success"})


@bp.route("/<string:group_id>/members", methods=["POST"])
@role_required(ROLE_ADMIN, ROLE_TEACHER)
def add_member(group_id):
    """Add a member to a class roster."""
    data = _form_data(MemberForm())
    db = firestore.client()
    member = RosterService.add_member(db, group_id, data)
    return jsonify(member), 201


@bp.route("/<string:group_id>/members/<string:key>", methods=["PATCH"])
@role_required(ROLE_ADMIN, ROLE_TEACHER)
def update_member(group_id, key):
    """Edit a member's details."""
    db = firestore.client()
    member = RosterService.update_member(db, group_id, key, _json_body())
    return jsonify(member)


@bp.route("/<string:group_id>/members/<string:key>", methods=["DELETE"])
@role_required(ROLE_ADMIN, ROLE_TEACHER)
def remove_member(group_id, key):
    """Remove a member from a class roster."""
    db = firestore.client()
    RosterService.remove_member(db, group_id, key)
    return jsonify({"status": "success"})


@bp.route("/<string:group_id>/attendance", methods=["GET"])
@role_required(ROLE_ADMIN, ROLE_TEACHER)
def attendance_grid(group_id):
    """Return a freshly seeded grid for ``?year=&month=``."""
    year, month = _period(request.args)
    db = firestore.client()
    group = RosterService.get_group(db, group_id)
    matrix = AttendanceMatrix(group["members"], _calendar(year, month))
    return jsonify(
        {
            "groupId": group_id,
            "groupName": group.get("name", ""),
            "year": year,
            "month": month,
            "sessionDates": [format_session_date(d) for d in matrix.session_dates],
            "members": matrix.members,
        }
    )


def _apply_marks(
    db: Any, group_id: str, matrix: AttendanceMatrix, entries: list[Any]
) -> None:
    """Apply submitted marks, adding members the roster does not know yet.

    Every entry is validated before the roster is written.
    """
    known: dict[str, int] = {}
    for index, member in enumerate(matrix.members):
        known.update(dict.fromkeys(lookup_keys(member), index))

    resolved: list[tuple[int | None, dict[str, Any]]] = []
    unknown = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise ValidationError("Each member entry must be an object.")
        keys = [entry["key"]] if entry.get("key") else lookup_keys(entry)
        index = next((known[k] for k in keys if k in known), None)
        if index is None:
            unknown.append(normalize_member(entry))
        resolved.append((index, entry))

    added = iter(RosterService.add_members(db, group_id, unknown))
    for index, entry in resolved:
        if index is None:
            matrix.insert_member(next(added))
            index = len(matrix) - 1

        marks = entry.get("attendance") or []
        for session_index, present in enumerate(marks[: matrix.session_count]):
            matrix.set_mark(index, session_index, present is True)


@bp.route("/<string:group_id>/attendance", methods=["POST"])
@role_required(ROLE_ADMIN, ROLE_TEACHER)
def submit_attendance(group_id):
    """Record attendance for one period and return its rate."""
    data = _json_body()
    year, month = _period(data)
    entries = data.get("members") or []
    if not isinstance(entries, list):
        raise ValidationError("'members' must be a list.")

    dates = _calendar(year, month)
    if not dates:
        raise ValidationError("No sessions fall in the selected month.")

    db = firestore.client()
    auth_context = current_auth()
    group = RosterService.get_group(db, group_id)
    matrix = AttendanceMatrix(group["members"], dates)
    _apply_marks(db, group_id, matrix, entries)

    snapshot = RecordService.build_snapshot(
        group, matrix, year, month, submitted_by=auth_context.uid
    )
    record_id = RecordService.submit(db, group_id, snapshot)
    RecordService.log_teacher_action(
        db, auth_context, details={"classId": group_id, "recordId": record_id}
    )
    summary = report_services.ReportService.compute_rate(snapshot)
    return jsonify({"recordId": record_id, **summary.to_dict()}), 201


@bp.route("/<string:group_id>/records", methods=["GET"])
@role_required(ROLE_ADMIN, ROLE_TEACHER)
def list_records(group_id):
    """Return a class's attendance records, oldest period first."""
    db = firestore.client()
    records = RecordService.fetch_all(db, group_id)
    return jsonify(report_services.ReportService.sort_chronologically(records))


@bp.route("/<string:group_id>/records/<string:record_id>", methods=["GET"])
@role_required(ROLE_ADMIN, ROLE_TEACHER)
def view_record(group_id, record_id):
    """Return one attendance record."""
    db = firestore.client()
    return jsonify(RecordService.fetch(db, group_id, record_id))


@bp.route("/<string:group_id>/records/<string:record_id>", methods=["PATCH"])
@role_required(ROLE_ADMIN)
def update_record(group_id, record_id):
    """Overwrite fields of one attendance record."""
    db = firestore.client()
    RecordService.update(db, group_id, record_id, _json_body())
    return jsonify({"status": "success"})


@bp.route("/<string:group_id>/records/<string:record_id>", methods=["DELETE"])
@role_required(ROLE_ADMIN)
def delete_record(group_id, record_id):
    """Delete one attendance record."""
    db = firestore.client()
    RecordService.delete(db, group_id, record_id)
    return jsonify({"status": "success"})


@bp.route("/<string:group_id>/analytics", methods=["GET"])
@role_required(ROLE_ADMIN)
def class_analytics(group_id):
    """Per-record rates, the monthly trend and per-member totals for a class."""
    db = firestore.client()
    group = RosterService.get_group(db, group_id)
    records = RecordService.fetch_all(db, group_id)
    return jsonify(
        {
            "groupId": group_id,
            "name": group.get("name", ""),
            "teacherName": group.get("teacherName", ""),
            "elderName": group.get("elderName", ""),
            **report_services.ReportService.record_analytics(records),
        }
    )
