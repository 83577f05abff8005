"""Service layer for class rosters."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from firebase_admin import firestore
from flask import current_app

from classroll.core.constants import (
    ALL_GROUP_TYPES,
    CLASSES_COLLECTION,
    DEFAULT_GROUP_TYPE,
    MEMBERSHIP_CHOICES,
    MEMBERSHIP_MEMBER,
)
from classroll.errors import DuplicateResourceError, NotFoundError, ValidationError
from classroll.utils import store_operation

from ..utils import member_key, new_member_id
from .feed import RosterFeed

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference

    from ..models import Group, Member

GROUP_FIELDS = ("name", "teacherName", "elderName", "groupType")
MEMBER_FIELDS = (
    "fullName",
    "residence",
    "prayerCell",
    "phone",
    "email",
    "membershipStatus",
    "baptizedFlag",
)
REQUIRED_MEMBER_FIELDS = ("fullName", "residence", "phone", "email")


def _clean(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def normalize_member(data: dict[str, Any]) -> Member:
    """Build a stored member from submitted fields, validating required ones."""
    missing = [f for f in REQUIRED_MEMBER_FIELDS if not _clean(data.get(f))]
    if missing:
        raise ValidationError(
            f"Please fill out all required fields: {', '.join(missing)}."
        )

    membership = _clean(data.get("membershipStatus")) or MEMBERSHIP_MEMBER
    if membership not in MEMBERSHIP_CHOICES:
        raise ValidationError(f"Unknown membership status '{membership}'.")

    member: Member = {
        "id": data.get("id") or new_member_id(),
        "fullName": _clean(data["fullName"]),
        "residence": _clean(data["residence"]),
        "prayerCell": _clean(data.get("prayerCell")) or "",
        "phone": _clean(data["phone"]),
        "email": _clean(data["email"]),
        "membershipStatus": membership,
        "baptizedFlag": bool(data.get("baptizedFlag", False)),
        "attendance": [],
    }
    return member


class RosterService:
    """Service class for class and member operations."""

    @staticmethod
    def _group_ref(db: Client, group_id: str) -> DocumentReference:
        return db.collection(CLASSES_COLLECTION).document(group_id)

    @staticmethod
    @store_operation("creating a class")
    def create_group(db: Client, fields: dict[str, Any]) -> str:
        """Create a class with an empty roster and return its id."""
        if not _clean(fields.get("name")):
            raise ValidationError("A class needs a name.")

        group_ref = db.collection(CLASSES_COLLECTION).document()
        group_data = {f: _clean(fields.get(f)) or "" for f in GROUP_FIELDS}
        group_data["groupType"] = group_data["groupType"] or DEFAULT_GROUP_TYPE
        group_data["members"] = []
        group_data["createdAt"] = firestore.SERVER_TIMESTAMP
        group_ref.set(group_data)
        current_app.logger.info(f"Class {group_ref.id} created.")
        return group_ref.id

    @staticmethod
    @store_operation("fetching a class")
    def get_group(db: Client, group_id: str) -> Group:
        """Return a class document, raising if it does not exist."""
        group_doc = RosterService._group_ref(db, group_id).get()
        if not group_doc.exists:
            raise NotFoundError("Class not found.")
        group_data = group_doc.to_dict() or {}
        group_data["id"] = group_doc.id
        group_data.setdefault("members", [])
        return group_data

    @staticmethod
    @store_operation("listing classes")
    def list_groups(db: Client, group_type: str | None = None) -> list[Group]:
        """Return all classes, optionally only those of one type."""
        query = db.collection(CLASSES_COLLECTION)
        if group_type and group_type != ALL_GROUP_TYPES:
            query = query.where(
                filter=firestore.FieldFilter("groupType", "==", group_type)
            )
        groups = []
        for doc in query.stream():
            data = doc.to_dict() or {}
            data["id"] = doc.id
            data.setdefault("members", [])
            groups.append(data)
        return groups

    @staticmethod
    @store_operation("updating a class")
    def update_group(db: Client, group_id: str, fields: dict[str, Any]) -> None:
        """Update class metadata. Members are changed through member operations."""
        updates = {f: _clean(fields[f]) for f in GROUP_FIELDS if f in fields}
        if not updates:
            raise ValidationError("No class fields to update.")
        if "name" in updates and not updates["name"]:
            raise ValidationError("A class needs a name.")

        group_ref = RosterService._group_ref(db, group_id)
        if not group_ref.get().exists:
            raise NotFoundError("Class not found.")
        group_ref.update(updates)
        current_app.logger.info(f"Class {group_id} updated.")

    @staticmethod
    @store_operation("deleting a class")
    def delete_group(db: Client, group_id: str) -> None:
        """Delete a class. Its attendance records are left in place."""
        RosterService._group_ref(db, group_id).delete()
        current_app.logger.info(f"Class {group_id} deleted.")

    @staticmethod
    def add_member(db: Client, group_id: str, data: dict[str, Any]) -> Member:
        """Append a validated member to a class roster."""
        return RosterService.add_members(db, group_id, [data])[0]

    @staticmethod
    @store_operation("adding members")
    def add_members(
        db: Client, group_id: str, entries: list[dict[str, Any]]
    ) -> list[Member]:
        """Validate every entry, then append them all in one roster write.

        Nothing is written when any entry is invalid or duplicates a member.
        """
        new_members = [normalize_member(data) for data in entries]
        if not new_members:
            return []

        group = RosterService.get_group(db, group_id)
        members = list(group["members"])
        for member in new_members:
            key = member_key(member)
            email = member["email"].lower()
            for existing in members:
                if member_key(existing) == key or (
                    (existing.get("email") or "").lower() == email
                ):
                    raise DuplicateResourceError(
                        f"A member with email '{member['email']}' is already in this class."
                    )
            members.append(member)

        RosterService._group_ref(db, group_id).update({"members": members})
        for member in new_members:
            current_app.logger.info(
                f"Member {member['id']} added to class {group_id}."
            )
        return new_members

    @staticmethod
    def _find_member(members: list[Member], key: str) -> int:
        for index, member in enumerate(members):
            if member_key(member) == key:
                return index
        raise NotFoundError(f"Member '{key}' not found.")

    @staticmethod
    @store_operation("updating a member")
    def update_member(
        db: Client, group_id: str, key: str, fields: dict[str, Any]
    ) -> Member:
        """Change the details of one member, addressed by member key."""
        updates = {f: _clean(fields[f]) for f in MEMBER_FIELDS if f in fields}
        if not updates:
            raise ValidationError("No member fields to update.")

        group = RosterService.get_group(db, group_id)
        members = list(group["members"])
        index = RosterService._find_member(members, key)
        merged = {**members[index], **updates}
        # Re-validate with the attendance and id preserved
        member = normalize_member(merged)
        member["id"] = members[index].get("id") or member["id"]
        member["attendance"] = list(members[index].get("attendance", []))
        members[index] = member

        RosterService._group_ref(db, group_id).update({"members": members})
        current_app.logger.info(f"Member {key} updated in class {group_id}.")
        return member

    @staticmethod
    @store_operation("removing a member")
    def remove_member(db: Client, group_id: str, key: str) -> None:
        """Remove one member, addressed by member key."""
        group = RosterService.get_group(db, group_id)
        members = list(group["members"])
        del members[RosterService._find_member(members, key)]
        RosterService._group_ref(db, group_id).update({"members": members})
        current_app.logger.info(f"Member {key} removed from class {group_id}.")

    @staticmethod
    def watch_group(
        db: Client,
        group_id: str,
        on_change: Callable[[Group | None], None],
        on_error: Callable[[Exception], None] | None = None,
    ) -> RosterFeed:
        """Subscribe to live changes of a class document."""
        return RosterFeed(RosterService._group_ref(db, group_id), on_change, on_error)
