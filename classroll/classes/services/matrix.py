"""In-memory attendance grid for one class and period."""

from __future__ import annotations

import copy
import datetime
from typing import Any

from classroll.errors import DuplicateResourceError, NotFoundError

from ..utils import member_key, new_member_id, pad_attendance


class AttendanceMatrix:
    """Editable members x session dates grid, staged before submission.

    Members are held in insertion order, keyed by member key. The matrix is
    seeded once from the roster and never reads the live roster again.
    """

    def __init__(
        self,
        roster: list[dict[str, Any]] | None = None,
        session_dates: list[datetime.date] | None = None,
    ) -> None:
        """Initialize the matrix, seeding it when a roster is given."""
        self._members: dict[str, dict[str, Any]] = {}
        self.session_dates: list[datetime.date] = list(session_dates or [])
        if roster is not None:
            self.seed(roster, self.session_dates)

    @property
    def members(self) -> list[dict[str, Any]]:
        """Members in display order."""
        return list(self._members.values())

    @property
    def session_count(self) -> int:
        """Number of session dates in the current period."""
        return len(self.session_dates)

    def __len__(self) -> int:
        return len(self._members)

    def seed(
        self, roster: list[dict[str, Any]], session_dates: list[datetime.date]
    ) -> None:
        """Load the roster, padding short attendance vectors with absences.

        Every roster entry is kept. An entry whose key is already taken, such
        as a second member sharing an email, is given its own id.
        """
        self.session_dates = list(session_dates)
        self._members = {}
        for entry in roster:
            member = copy.deepcopy(entry)
            member["attendance"] = pad_attendance(
                member.get("attendance"), self.session_count
            )
            key = member_key(member)
            if key in self._members:
                member["id"] = new_member_id()
                key = member["id"]
            self._members[key] = member

    def reseed(self, session_dates: list[datetime.date]) -> None:
        """Move the grid to another calendar, keeping existing marks."""
        self.seed(self.members, session_dates)

    def _member_at(self, member_index: int) -> dict[str, Any]:
        if not 0 <= member_index < len(self._members):
            raise IndexError(f"Member index {member_index} out of range.")
        return self.members[member_index]

    def _member_by_key(self, key: str) -> dict[str, Any]:
        member = self._members.get(key)
        if member is None:
            raise NotFoundError(f"Member '{key}' not found.")
        return member

    def _check_session(self, session_index: int) -> None:
        if not 0 <= session_index < self.session_count:
            raise IndexError(f"Session index {session_index} out of range.")

    def _flip(self, member: dict[str, Any], session_index: int) -> bool:
        self._check_session(session_index)
        marks = pad_attendance(member.get("attendance"), self.session_count)
        marks[session_index] = not marks[session_index]
        member["attendance"] = marks
        return marks[session_index]

    def toggle(self, member_index: int, session_index: int) -> bool:
        """Flip one mark and return its new value."""
        return self._flip(self._member_at(member_index), session_index)

    def toggle_member(self, key: str, session_index: int) -> bool:
        """Flip one mark for the member identified by ``key``."""
        return self._flip(self._member_by_key(key), session_index)

    def set_mark(self, member_index: int, session_index: int, present: bool) -> None:
        """Set one mark explicitly."""
        member = self._member_at(member_index)
        if self.attendance_for(member_index)[session_index] != bool(present):
            self._flip(member, session_index)

    def attendance_for(self, member_index: int) -> list[bool]:
        """Return a padded copy of one member's marks."""
        member = self._member_at(member_index)
        return pad_attendance(member.get("attendance"), self.session_count)

    def insert_member(self, record: dict[str, Any]) -> dict[str, Any]:
        """Append a member who is absent from every session so far."""
        member = copy.deepcopy(record)
        member.setdefault("id", new_member_id())
        key = member_key(member)
        if key in self._members:
            raise DuplicateResourceError(f"Member '{key}' is already on the roster.")
        member["attendance"] = [False] * self.session_count
        self._members[key] = member
        return member

    def to_snapshot_members(self) -> list[dict[str, Any]]:
        """Value copies of every member, ready to persist."""
        return [copy.deepcopy(member) for member in self._members.values()]
