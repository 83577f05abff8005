"""Data models for the classes blueprint."""

from __future__ import annotations

from typing import Any, TypedDict

from classroll.core.types import FirestoreDocument


class Member(TypedDict, total=False):
    """A member embedded in a class document."""

    id: str
    fullName: str
    name: str
    residence: str
    prayerCell: str
    phone: str
    email: str
    membershipStatus: str
    baptizedFlag: bool
    attendance: list[bool]


class Group(FirestoreDocument, total=False):
    """A class document in Firestore."""

    name: str
    teacherName: str
    elderName: str
    groupType: str
    members: list[Member]


class AttendanceSnapshot(TypedDict, total=False):
    """A per-class, per-period attendance record."""

    recordId: str
    groupId: str
    year: int
    month: int
    groupName: str
    teacherName: str
    elderName: str
    groupType: str
    sessionDates: list[str]
    members: list[Member]
    writtenAt: Any
    submittedBy: str | None


class TeacherAction(TypedDict, total=False):
    """An audit entry for an action performed by a teacher."""

    uid: str
    email: str | None
    action: str
    details: dict[str, Any]
    timestamp: Any
