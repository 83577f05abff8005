"""Explicit authentication context passed into services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from classroll.core.constants import ROLE_ADMIN, ROLE_TEACHER, ROLES, USERS_COLLECTION


@dataclass(frozen=True)
class AuthContext:
    """The resolved current user and role for one request."""

    current_user: dict[str, Any] | None = None
    role: str | None = None

    @property
    def uid(self) -> str | None:
        """The Firebase uid of the current user, if any."""
        if self.current_user is None:
            return None
        return self.current_user.get("uid")

    @property
    def email(self) -> str | None:
        """The email of the current user, if any."""
        if self.current_user is None:
            return None
        return self.current_user.get("email")

    @property
    def is_authenticated(self) -> bool:
        """Check whether a user is signed in."""
        return self.current_user is not None

    @property
    def is_admin(self) -> bool:
        """Check whether the user is an admin."""
        return self.role == ROLE_ADMIN

    @property
    def can_edit_attendance(self) -> bool:
        """Admins and teachers may edit and submit attendance."""
        return self.role in (ROLE_ADMIN, ROLE_TEACHER)

    def has_role(self, *roles: str) -> bool:
        """Check the role against any of ``roles``."""
        return self.role in roles


ANONYMOUS = AuthContext()


def resolve_auth_context(db: Any, user_id: str | None) -> AuthContext:
    """Load the user document once and build the request's auth context."""
    if not user_id:
        return ANONYMOUS
    user_doc = db.collection(USERS_COLLECTION).document(user_id).get()
    if not user_doc.exists:
        return ANONYMOUS
    data = user_doc.to_dict() or {}
    role = data.get("role")
    if role not in ROLES:
        role = None
    return AuthContext(current_user={**data, "uid": user_id}, role=role)
