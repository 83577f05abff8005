"""Cross-class attendance reporting."""

from __future__ import annotations

import datetime
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

from firebase_admin import firestore

from classroll.classes.services.sessions import period_label
from classroll.classes.utils import count_present, display_name
from classroll.core.constants import ALL_GROUP_TYPES, RECORDS_COLLECTION
from classroll.utils import store_operation

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


@dataclass(frozen=True)
class RateSummary:
    """Attendance totals and rate for one or more snapshots."""

    total_lessons: int
    total_members: int
    attended: int
    possible: int
    rate: float

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        data = asdict(self)
        data["rate"] = round(self.rate, 2)
        return data


def _percentage(attended: int, possible: int) -> float:
    return attended / possible * 100 if possible > 0 else 0


def _period_of(snapshot: dict[str, Any]) -> tuple[int, int]:
    """Return ``(year, month)``, falling back to the ``year-month`` record id."""
    year, month = snapshot.get("year"), snapshot.get("month")
    if year is None or month is None:
        record_id = snapshot.get("recordId") or snapshot.get("id") or ""
        parts = str(record_id).split("-")
        try:
            year, month = int(parts[0]), int(parts[1])
        except (IndexError, ValueError):
            return 0, 0
    return int(year), int(month)


def _member_summary_key(member: dict[str, Any]) -> str:
    if member.get("email"):
        return str(member["email"]).lower()
    return display_name(member)


class ReportService:
    """Service class for attendance reports."""

    @staticmethod
    @store_operation("querying attendance records")
    def query_by_period(
        db: Client,
        year: int,
        month: int | None = None,
        written_after: datetime.datetime | None = None,
        written_before: datetime.datetime | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch snapshots for a period across every class."""
        query = db.collection_group(RECORDS_COLLECTION).where(
            filter=firestore.FieldFilter("year", "==", year)
        )
        if month is not None:
            query = query.where(filter=firestore.FieldFilter("month", "==", month))
        if written_after is not None:
            query = query.where(
                filter=firestore.FieldFilter("writtenAt", ">=", written_after)
            )
        if written_before is not None:
            query = query.where(
                filter=firestore.FieldFilter("writtenAt", "<", written_before)
            )

        records = []
        for doc in query.stream():
            data = doc.to_dict() or {}
            data["id"] = doc.id
            if "groupId" not in data and doc.reference.parent.parent is not None:
                data["groupId"] = doc.reference.parent.parent.id
            records.append(data)
        return records

    @staticmethod
    def compute_rate(snapshot: dict[str, Any]) -> RateSummary:
        """Attended marks over sessions x members, as a percentage."""
        members = snapshot.get("members") or []
        total_lessons = len(snapshot.get("sessionDates") or [])
        total_members = len(members)
        attended = sum(count_present(m.get("attendance")) for m in members)
        possible = total_lessons * total_members
        return RateSummary(
            total_lessons=total_lessons,
            total_members=total_members,
            attended=attended,
            possible=possible,
            rate=_percentage(attended, possible),
        )

    @staticmethod
    def sort_chronologically(snapshots: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Order snapshots by year, then month."""
        return sorted(snapshots, key=_period_of)

    @staticmethod
    def to_series(snapshots: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Map snapshots to chart points ordered by period."""
        series = []
        for snapshot in ReportService.sort_chronologically(snapshots):
            year, month = _period_of(snapshot)
            series.append(
                {
                    "periodLabel": period_label(year, month),
                    "rate": ReportService.compute_rate(snapshot).rate,
                }
            )
        return series

    @staticmethod
    def report_rows(snapshots: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Flatten snapshots into one export row each, ordered by period."""
        rows = []
        for snapshot in ReportService.sort_chronologically(snapshots):
            year, month = _period_of(snapshot)
            summary = ReportService.compute_rate(snapshot)
            rows.append(
                {
                    "recordId": snapshot.get("recordId") or snapshot.get("id"),
                    "groupName": snapshot.get("groupName", ""),
                    "teacherName": snapshot.get("teacherName", ""),
                    "elderName": snapshot.get("elderName", ""),
                    "year": year,
                    "month": month,
                    "sessions": summary.total_lessons,
                    "membersCount": summary.total_members,
                    "attended": summary.attended,
                    "rate": round(summary.rate, 2),
                    "members": snapshot.get("members") or [],
                }
            )
        return rows

    @staticmethod
    def overall_rate(snapshots: list[dict[str, Any]]) -> RateSummary:
        """Pool every snapshot into a single rate."""
        summaries = [ReportService.compute_rate(s) for s in snapshots]
        attended = sum(s.attended for s in summaries)
        possible = sum(s.possible for s in summaries)
        return RateSummary(
            total_lessons=sum(s.total_lessons for s in summaries),
            total_members=sum(s.total_members for s in summaries),
            attended=attended,
            possible=possible,
            rate=_percentage(attended, possible),
        )

    @staticmethod
    def member_summary(snapshots: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Per-member totals across snapshots, keyed by email or name."""
        aggregated: dict[str, dict[str, Any]] = {}
        for snapshot in snapshots:
            for member in snapshot.get("members") or []:
                key = _member_summary_key(member)
                stats = aggregated.setdefault(
                    key,
                    {
                        "fullName": display_name(member) or "Unknown",
                        "totalSessions": 0,
                        "attended": 0,
                    },
                )
                stats["totalSessions"] += len(member.get("attendance") or [])
                stats["attended"] += count_present(member.get("attendance"))

        for stats in aggregated.values():
            stats["rate"] = round(
                _percentage(stats["attended"], stats["totalSessions"]), 2
            )
        return list(aggregated.values())

    @staticmethod
    def record_analytics(snapshots: list[dict[str, Any]]) -> dict[str, Any]:
        """Everything the per-class analytics view shows."""
        ordered = ReportService.sort_chronologically(snapshots)
        records = []
        for snapshot in ordered:
            summary = ReportService.compute_rate(snapshot)
            records.append(
                {
                    "id": snapshot.get("recordId") or snapshot.get("id"),
                    "sessions": summary.total_lessons,
                    "membersCount": summary.total_members,
                    "rate": round(summary.rate, 2),
                    "writtenAt": snapshot.get("writtenAt"),
                }
            )
        return {
            "records": records,
            "series": ReportService.to_series(ordered),
            "members": ReportService.member_summary(ordered),
            "overall": ReportService.overall_rate(ordered).to_dict(),
        }

    @staticmethod
    def dashboard(
        snapshots: list[dict[str, Any]], group_type: str | None = None
    ) -> dict[str, Any]:
        """Summarize each class and the overall rate, optionally by class type."""
        if group_type and group_type != ALL_GROUP_TYPES:
            snapshots = [s for s in snapshots if s.get("groupType") == group_type]

        by_group: dict[str, list[dict[str, Any]]] = {}
        for snapshot in snapshots:
            group_key = snapshot.get("groupId") or snapshot.get("groupName", "")
            by_group.setdefault(group_key, []).append(snapshot)

        groups = []
        for group_id, group_snapshots in by_group.items():
            latest = ReportService.sort_chronologically(group_snapshots)[-1]
            groups.append(
                {
                    "groupId": group_id,
                    "groupName": latest.get("groupName", ""),
                    "teacherName": latest.get("teacherName", ""),
                    "elderName": latest.get("elderName", ""),
                    "groupType": latest.get("groupType", ""),
                    **ReportService.overall_rate(group_snapshots).to_dict(),
                }
            )
        groups.sort(key=lambda g: g["groupName"])

        return {
            "groups": groups,
            "overall": ReportService.overall_rate(snapshots).to_dict(),
        }
