"""Utility functions for class rosters."""

from __future__ import annotations

import uuid
from typing import Any


def new_member_id() -> str:
    """Generate an id for a newly added member."""
    return uuid.uuid4().hex


def member_key(member: dict[str, Any]) -> str:
    """Identify a member by assigned id, then email, then name."""
    if member.get("id"):
        return str(member["id"])
    if member.get("email"):
        return str(member["email"]).strip().lower()
    return display_name(member)


def display_name(member: dict[str, Any]) -> str:
    """Return the name shown for a member."""
    return member.get("fullName") or member.get("name") or ""


def pad_attendance(attendance: list[bool] | None, length: int) -> list[bool]:
    """Extend an attendance vector with absences up to ``length``.

    Longer vectors are returned unchanged.
    """
    marks = [bool(mark) for mark in attendance or []]
    if len(marks) < length:
        marks.extend([False] * (length - len(marks)))
    return marks


def count_present(attendance: list[bool] | None) -> int:
    """Count the sessions marked present."""
    return sum(1 for mark in attendance or [] if mark is True)


def lookup_keys(member: dict[str, Any]) -> list[str]:
    """Every key a submitted entry may use to refer to this member."""
    keys = [member_key(member)]
    if member.get("email"):
        keys.append(str(member["email"]).strip().lower())
    return keys
