"""Route tests for classes, rosters and attendance submission."""

import unittest

from tests.helpers import ADMIN_ID, STUDENT_ID, TEACHER_ID, AppTestCase, member_payload


class ClassRoutesTestCase(AppTestCase):
    def test_list_classes(self):
        self.login(STUDENT_ID)
        self.create_class("Service")
        self.create_class("Youth", groupType="Youth")
        response = self.client.get("/classes/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json), 2)
        response = self.client.get("/classes/?type=Youth")
        self.assertEqual([g["name"] for g in response.json], ["Youth"])

    def test_list_classes_requires_sign_in(self):
        self.assertEqual(self.client.get("/classes/").status_code, 401)

    def test_create_class(self):
        self.login(ADMIN_ID)
        response = self.client.post(
            "/classes/",
            data={"name": "Bethlehem", "teacherName": "Ruth", "elderName": "Boaz"},
        )
        self.assertEqual(response.status_code, 201)
        group_id = response.json["id"]
        stored = self.db.collection("classes").document(group_id).get().to_dict()
        self.assertEqual(stored["name"], "Bethlehem")
        self.assertEqual(stored["groupType"], "Church Service")
        self.assertEqual(stored["members"], [])

    def test_create_class_validation(self):
        self.login(ADMIN_ID)
        response = self.client.post("/classes/", data={"teacherName": "Ruth"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("name", response.json["error"])

    def test_create_class_admin_only(self):
        self.login(TEACHER_ID)
        response = self.client.post("/classes/", data={"name": "Bethlehem"})
        self.assertEqual(response.status_code, 403)

    def test_view_update_delete_class(self):
        self.login(ADMIN_ID)
        group_id = self.create_class("Old")
        self.assertEqual(
            self.client.get(f"/classes/{group_id}").json["name"], "Old"
        )
        response = self.client.patch(f"/classes/{group_id}", json={"name": "New"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            self.client.get(f"/classes/{group_id}").json["name"], "New"
        )
        self.assertEqual(self.client.delete(f"/classes/{group_id}").status_code, 200)
        self.assertEqual(self.client.get(f"/classes/{group_id}").status_code, 404)

    def test_update_class_requires_json(self):
        self.login(ADMIN_ID)
        group_id = self.create_class()
        response = self.client.patch(f"/classes/{group_id}", data="name=X")
        self.assertEqual(response.status_code, 400)


class MemberRoutesTestCase(AppTestCase):
    def setUp(self):
        super().setUp()
        self.group_id = self.create_class()
        self.login(TEACHER_ID)

    def _members(self):
        group = self.db.collection("classes").document(self.group_id).get()
        return group.to_dict()["members"]

    def test_add_member(self):
        response = self.client.post(
            f"/classes/{self.group_id}/members",
            data={**member_payload("Alice"), "baptizedFlag": "y"},
        )
        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.json["id"])
        members = self._members()
        self.assertEqual(len(members), 1)
        self.assertTrue(members[0]["baptizedFlag"])

    def test_add_member_missing_fields(self):
        response = self.client.post(
            f"/classes/{self.group_id}/members", data={"fullName": "Alice"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self._members(), [])

    def test_add_member_bad_email(self):
        response = self.client.post(
            f"/classes/{self.group_id}/members",
            data={**member_payload("Alice"), "email": "not-an-email"},
        )
        self.assertEqual(response.status_code, 400)

    def test_add_duplicate_member(self):
        url = f"/classes/{self.group_id}/members"
        self.client.post(url, data=member_payload("Alice"))
        response = self.client.post(url, data=member_payload("Alice"))
        self.assertEqual(response.status_code, 409)
        self.assertEqual(len(self._members()), 1)

    def test_update_and_remove_member(self):
        url = f"/classes/{self.group_id}/members"
        member_id = self.client.post(url, data=member_payload("Alice")).json["id"]

        response = self.client.patch(f"{url}/{member_id}", json={"phone": "555-1234"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json["phone"], "555-1234")

        self.assertEqual(self.client.delete(f"{url}/{member_id}").status_code, 200)
        self.assertEqual(self._members(), [])
        self.assertEqual(self.client.delete(f"{url}/{member_id}").status_code, 404)

    def test_student_cannot_add_member(self):
        self.login(STUDENT_ID)
        response = self.client.post(
            f"/classes/{self.group_id}/members", data=member_payload("Alice")
        )
        self.assertEqual(response.status_code, 403)


class AttendanceRoutesTestCase(AppTestCase):
    def setUp(self):
        super().setUp()
        self.group_id = self.create_class(
            "G1",
            members=[
                {**member_payload("Alice"), "id": "alice", "attendance": [True] * 5},
                {**member_payload("Bob"), "id": "bob", "attendance": []},
            ],
        )
        self.login(TEACHER_ID)

    def _record(self, record_id):
        return (
            self.db.collection("classes")
            .document(self.group_id)
            .collection("attendanceRecords")
            .document(record_id)
            .get()
        )

    def test_grid_pads_without_truncating(self):
        response = self.client.get(
            f"/classes/{self.group_id}/attendance?year=2025&month=4"
        )
        self.assertEqual(response.status_code, 200)
        data = response.json
        self.assertEqual(
            data["sessionDates"],
            ["2025-04-05", "2025-04-12", "2025-04-19", "2025-04-26"],
        )
        self.assertEqual(len(data["members"][0]["attendance"]), 5)
        self.assertEqual(data["members"][1]["attendance"], [False] * 4)

    def test_grid_rejects_bad_period(self):
        url = f"/classes/{self.group_id}/attendance"
        self.assertEqual(self.client.get(f"{url}?year=2025&month=13").status_code, 400)
        self.assertEqual(self.client.get(f"{url}?year=abc&month=3").status_code, 400)
        self.assertEqual(self.client.get(f"{url}?month=3").status_code, 400)

    def test_grid_for_missing_class(self):
        response = self.client.get("/classes/missing/attendance?year=2025&month=3")
        self.assertEqual(response.status_code, 404)

    def test_submit_attendance(self):
        """March 2025 Saturdays, Alice present twice, Bob never."""
        response = self.client.post(
            f"/classes/{self.group_id}/attendance",
            json={
                "year": 2025,
                "month": 3,
                "members": [
                    {"key": "alice", "attendance": [True, True, False, False, False]},
                    {"key": "bob", "attendance": []},
                ],
            },
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json["recordId"], "2025-3")
        self.assertEqual(response.json["attended"], 2)
        self.assertEqual(response.json["possible"], 10)
        self.assertEqual(response.json["rate"], 20.0)

        record = self._record("2025-3")
        self.assertTrue(record.exists)
        data = record.to_dict()
        self.assertEqual(data["groupName"], "G1")
        self.assertEqual(len(data["sessionDates"]), 5)
        self.assertEqual(data["members"][0]["attendance"], [True, True] + [False] * 3)
        self.assertEqual(data["submittedBy"], TEACHER_ID)

        actions = [d.to_dict() for d in self.db.collection("teacherActions").stream()]
        self.assertEqual(len(actions), 1)
        self.assertEqual(actions[0]["details"]["recordId"], "2025-3")

    def test_resubmit_keeps_one_record(self):
        url = f"/classes/{self.group_id}/attendance"
        self.client.post(url, json={"year": 2025, "month": 3, "members": []})
        response = self.client.post(
            url,
            json={
                "year": 2025,
                "month": 3,
                "members": [{"email": "BOB@example.com", "attendance": [True]}],
            },
        )
        self.assertEqual(response.status_code, 201)
        records = list(
            self.db.collection("classes")
            .document(self.group_id)
            .collection("attendanceRecords")
            .stream()
        )
        self.assertEqual(len(records), 1)
        members = records[0].to_dict()["members"]
        self.assertEqual(members[1]["attendance"][0], True)

    def test_submit_adds_unknown_member(self):
        response = self.client.post(
            f"/classes/{self.group_id}/attendance",
            json={
                "year": 2025,
                "month": 3,
                "members": [{**member_payload("Carol"), "attendance": [True]}],
            },
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json["total_members"], 3)
        roster = self.db.collection("classes").document(self.group_id).get()
        self.assertEqual(
            [m["fullName"] for m in roster.to_dict()["members"]],
            ["Alice", "Bob", "Carol"],
        )
        members = self._record("2025-3").to_dict()["members"]
        self.assertEqual(members[2]["attendance"], [True] + [False] * 4)

    def test_submit_unknown_member_needs_details(self):
        response = self.client.post(
            f"/classes/{self.group_id}/attendance",
            json={
                "year": 2025,
                "month": 3,
                "members": [
                    {**member_payload("Carol"), "attendance": [True]},
                    {"fullName": "Dan"},
                ],
            },
        )
        self.assertEqual(response.status_code, 400)
        self.assertFalse(self._record("2025-3").exists)
        roster = self.db.collection("classes").document(self.group_id).get()
        self.assertEqual(
            [m["fullName"] for m in roster.to_dict()["members"]], ["Alice", "Bob"]
        )

    def test_submit_validation(self):
        url = f"/classes/{self.group_id}/attendance"
        self.assertEqual(self.client.post(url, json={"year": 2025}).status_code, 400)
        response = self.client.post(
            url, json={"year": 2025, "month": 3, "members": "alice"}
        )
        self.assertEqual(response.status_code, 400)

    def test_student_cannot_submit(self):
        self.login(STUDENT_ID)
        response = self.client.post(
            f"/classes/{self.group_id}/attendance",
            json={"year": 2025, "month": 3, "members": []},
        )
        self.assertEqual(response.status_code, 403)


class RecordRoutesTestCase(AppTestCase):
    def setUp(self):
        super().setUp()
        self.group_id = self.create_class("G1")
        records = self.db.collection("classes").document(self.group_id).collection(
            "attendanceRecords"
        )
        for month, marks in ((4, [True, True, True, True]), (3, [True, False])):
            records.document(f"2025-{month}").set(
                {
                    "recordId": f"2025-{month}",
                    "groupId": self.group_id,
                    "year": 2025,
                    "month": month,
                    "groupName": "G1",
                    "sessionDates": ["d"] * len(marks),
                    "members": [{"fullName": "Alice", "attendance": marks}],
                }
            )
        self.login(ADMIN_ID)

    def test_list_records_in_period_order(self):
        response = self.client.get(f"/classes/{self.group_id}/records")
        self.assertEqual(response.status_code, 200)
        self.assertEqual([r["id"] for r in response.json], ["2025-3", "2025-4"])

    def test_view_record(self):
        response = self.client.get(f"/classes/{self.group_id}/records/2025-3")
        self.assertEqual(response.json["month"], 3)
        missing = self.client.get(f"/classes/{self.group_id}/records/2025-9")
        self.assertEqual(missing.status_code, 404)

    def test_update_record(self):
        url = f"/classes/{self.group_id}/records/2025-3"
        response = self.client.patch(url, json={"teacherName": "Ruth"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.client.get(url).json["teacherName"], "Ruth")
        self.assertEqual(self.client.patch(url, json={"year": 2024}).status_code, 400)

    def test_teacher_cannot_update_record(self):
        self.login(TEACHER_ID)
        response = self.client.patch(
            f"/classes/{self.group_id}/records/2025-3", json={"teacherName": "Ruth"}
        )
        self.assertEqual(response.status_code, 403)

    def test_delete_record(self):
        url = f"/classes/{self.group_id}/records/2025-4"
        self.assertEqual(self.client.delete(url).status_code, 200)
        self.assertEqual(self.client.get(url).status_code, 404)

    def test_analytics(self):
        response = self.client.get(f"/classes/{self.group_id}/analytics")
        self.assertEqual(response.status_code, 200)
        data = response.json
        self.assertEqual(data["name"], "G1")
        self.assertEqual([p["periodLabel"] for p in data["series"]], ["3/2025", "4/2025"])
        self.assertEqual([r["rate"] for r in data["records"]], [50.0, 100.0])
        self.assertEqual(data["overall"]["attended"], 5)
        self.assertEqual(data["members"][0]["totalSessions"], 6)


if __name__ == "__main__":
    unittest.main()
