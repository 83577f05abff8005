"""Persistence of per-period attendance snapshots."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from firebase_admin import firestore
from flask import current_app

from classroll.core.constants import (
    ACTION_SUBMIT_ATTENDANCE,
    CLASSES_COLLECTION,
    RECORDS_COLLECTION,
    TEACHER_ACTIONS_COLLECTION,
)
from classroll.errors import NotFoundError, ValidationError
from classroll.utils import store_operation

from .sessions import format_session_date, record_id_for

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.collection import CollectionReference

    from classroll.auth.context import AuthContext

    from ..models import AttendanceSnapshot, Group
    from .matrix import AttendanceMatrix

IDENTITY_FIELDS = frozenset({"recordId", "groupId", "year", "month"})


class RecordService:
    """Reads and writes attendance snapshots under each class."""

    @staticmethod
    def _records(db: Client, group_id: str) -> CollectionReference:
        return (
            db.collection(CLASSES_COLLECTION)
            .document(group_id)
            .collection(RECORDS_COLLECTION)
        )

    @staticmethod
    def build_snapshot(
        group: Group,
        matrix: AttendanceMatrix,
        year: int,
        month: int,
        submitted_by: str | None = None,
    ) -> AttendanceSnapshot:
        """Assemble the snapshot fields for one period from a class and grid."""
        return {
            "year": year,
            "month": month,
            "groupName": group.get("name", ""),
            "teacherName": group.get("teacherName", ""),
            "elderName": group.get("elderName", ""),
            "groupType": group.get("groupType", ""),
            "sessionDates": [format_session_date(d) for d in matrix.session_dates],
            "members": matrix.to_snapshot_members(),
            "submittedBy": submitted_by,
        }

    @staticmethod
    @store_operation("submitting attendance")
    def submit(db: Client, group_id: str, snapshot: AttendanceSnapshot) -> str:
        """Merge-write a snapshot into the record for its period.

        Fields present in ``snapshot`` replace the stored ones; absent fields
        are left as they are. Returns the record id.
        """
        if "year" not in snapshot or "month" not in snapshot:
            raise ValidationError("A snapshot needs both a year and a month.")

        record_id = record_id_for(snapshot["year"], snapshot["month"])
        fields = dict(snapshot)
        fields.update(
            {
                "recordId": record_id,
                "groupId": group_id,
                "writtenAt": firestore.SERVER_TIMESTAMP,
            }
        )
        RecordService._records(db, group_id).document(record_id).set(
            fields, merge=True
        )
        current_app.logger.info(
            f"Attendance record {record_id} submitted for class {group_id}."
        )
        return record_id

    @staticmethod
    @store_operation("fetching attendance records")
    def fetch_all(db: Client, group_id: str) -> list[dict[str, Any]]:
        """Return every snapshot for a class, in no particular order."""
        return [
            {**(doc.to_dict() or {}), "id": doc.id}
            for doc in RecordService._records(db, group_id).stream()
        ]

    @staticmethod
    @store_operation("fetching an attendance record")
    def fetch(db: Client, group_id: str, record_id: str) -> dict[str, Any]:
        """Return one snapshot, raising if it does not exist."""
        doc = RecordService._records(db, group_id).document(record_id).get()
        if not doc.exists:
            raise NotFoundError(f"Attendance record '{record_id}' not found.")
        return {**(doc.to_dict() or {}), "id": doc.id}

    @staticmethod
    @store_operation("updating an attendance record")
    def update(
        db: Client, group_id: str, record_id: str, partial_fields: dict[str, Any]
    ) -> None:
        """Overwrite some fields of an existing snapshot."""
        locked = IDENTITY_FIELDS.intersection(partial_fields)
        if locked:
            raise ValidationError(
                f"Cannot change record identity fields: {', '.join(sorted(locked))}."
            )
        if not partial_fields:
            raise ValidationError("No fields to update.")

        record_ref = RecordService._records(db, group_id).document(record_id)
        if not record_ref.get().exists:
            raise NotFoundError(f"Attendance record '{record_id}' not found.")
        record_ref.update(partial_fields)
        current_app.logger.info(
            f"Attendance record {record_id} updated for class {group_id}."
        )

    @staticmethod
    @store_operation("deleting an attendance record")
    def delete(db: Client, group_id: str, record_id: str) -> None:
        """Remove one snapshot."""
        RecordService._records(db, group_id).document(record_id).delete()
        current_app.logger.info(
            f"Attendance record {record_id} deleted for class {group_id}."
        )

    @staticmethod
    @store_operation("logging a teacher action")
    def log_teacher_action(
        db: Client,
        auth: AuthContext,
        action: str = ACTION_SUBMIT_ATTENDANCE,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Record who did what, for auditing."""
        if not auth.is_authenticated:
            return
        db.collection(TEACHER_ACTIONS_COLLECTION).add(
            {
                "uid": auth.uid,
                "email": auth.email,
                "action": action,
                "details": details or {},
                "timestamp": firestore.SERVER_TIMESTAMP,
            }
        )
