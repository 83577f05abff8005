"""Shared fixtures for route and service tests."""

from __future__ import annotations

import unittest
from typing import Any
from unittest.mock import patch

from mockfirestore import MockFirestore

from classroll import create_app
from tests.conftest import patch_mockfirestore

ADMIN_ID = "admin_uid"
TEACHER_ID = "teacher_uid"
STUDENT_ID = "student_uid"

USERS = {
    ADMIN_ID: {"name": "Admin User", "email": "admin@example.com", "role": "admin"},
    TEACHER_ID: {
        "name": "Teacher User",
        "email": "teacher@example.com",
        "role": "teacher",
    },
    STUDENT_ID: {
        "name": "Student User",
        "email": "student@example.com",
        "role": "student",
    },
}


def member_payload(name: str, **overrides: Any) -> dict[str, Any]:
    """A complete member entry as a client would submit it."""
    payload = {
        "fullName": name,
        "residence": "Town",
        "prayerCell": "North",
        "phone": "555-0100",
        "email": f"{name.lower().replace(' ', '.')}@example.com",
        "membershipStatus": "Member",
    }
    payload.update(overrides)
    return payload


class AppTestCase(unittest.TestCase):
    """Flask app backed by an in-memory Firestore."""

    def setUp(self) -> None:
        """Set up a test client and a mock Firestore shared by every module."""
        patch_mockfirestore()
        self.db = MockFirestore()

        patchers = [
            patch("firebase_admin.initialize_app"),
            patch("firebase_admin.firestore.client", return_value=self.db),
        ]
        for p in patchers:
            p.start()
            self.addCleanup(p.stop)

        for uid, data in USERS.items():
            self.db.collection("users").document(uid).set(data)

        self.app = create_app(
            {"TESTING": True, "WTF_CSRF_ENABLED": False, "SERVER_NAME": "localhost"}
        )
        self.client = self.app.test_client()
        self.app_context = self.app.app_context()
        self.app_context.push()

    def tearDown(self) -> None:
        """Tear down the app context and the in-memory store."""
        self.app_context.pop()
        self.db.reset()

    def login(self, user_id: str) -> None:
        """Simulate a signed-in session for ``user_id``."""
        with self.client.session_transaction() as sess:
            sess["user_id"] = user_id

    def create_class(self, name: str = "Bethlehem", members=None, **fields) -> str:
        """Store a class document directly and return its id."""
        group_ref = self.db.collection("classes").document()
        group_ref.set(
            {
                "name": name,
                "teacherName": fields.get("teacherName", f"Teacher {name}"),
                "elderName": fields.get("elderName", f"Elder {name}"),
                "groupType": fields.get("groupType", "Church Service"),
                "members": members or [],
            }
        )
        return group_ref.id
