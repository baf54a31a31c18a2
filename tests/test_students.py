from sqlalchemy.orm import Session

from svalutation.models import Student

from .base import APITestCase


class TestStudents(APITestCase):
    def test_create_and_get(self):
        student_id = self.create_student("Ann", "Lee", 1)
        self.assertIsInstance(student_id, int)

        response = self.get(f"/api/students/{student_id}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {
            "id": student_id,
            "name": "Ann",
            "surname": "Lee",
            "class": {"id": 1, "name": "1A"},
        })

    def test_student_without_class(self):
        student_id = self.create("/api/students", {"name": "Bo", "surname": "Kim"})
        response = self.get(f"/api/students/{student_id}")
        self.assertIsNone(response.json()["class"])

    def test_list(self):
        first = self.create_student("Ann", "Lee", 1)
        second = self.create_student("Ben", "Orr", 2)
        response = self.get("/api/students")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual([s["id"] for s in body], [first, second])
        self.assertEqual(body[1]["class"], {"id": 2, "name": "2B"})

    def test_list_by_class(self):
        self.create_student("Ann", "Lee", 1)
        in_two = self.create_student("Ben", "Orr", 2)
        response = self.get("/api/students/class/2")
        self.assertEqual([s["id"] for s in response.json()], [in_two])
        self.assertEqual(self.get("/api/students/class/3").json(), [])

    def test_unknown_class_rejected(self):
        response = self.post("/api/students", {"name": "Ann", "surname": "Lee", "class": 42})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.text, "Unknown class 42")
        self.assertEqual(self.get("/api/students").json(), [])

    def test_missing_field_is_bad_request(self):
        response = self.post("/api/students", {"name": "Ann"})
        self.assertEqual(response.status_code, 400)

    def test_partial_update(self):
        student_id = self.create_student("Ann", "Lee", 1)
        response = self.patch(f"/api/students/{student_id}", {"surname": "Park", "name": ""})
        self.assertEqual(response.status_code, 200)

        body = self.get(f"/api/students/{student_id}").json()
        self.assertEqual(body["name"], "Ann")
        self.assertEqual(body["surname"], "Park")
        self.assertEqual(body["class"]["id"], 1)

        self.patch(f"/api/students/{student_id}", {"class": 3})
        self.assertEqual(self.get(f"/api/students/{student_id}").json()["class"], {"id": 3, "name": "3C"})

    def test_update_unknown_student(self):
        response = self.patch("/api/students/999", {"name": "X"})
        self.assertEqual(response.status_code, 404)

    def test_get_unknown_student(self):
        response = self.get("/api/students/999")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.text, "Student not found")

    def test_delete_is_idempotent(self):
        student_id = self.create_student()
        self.assertEqual(self.delete(f"/api/students/{student_id}").status_code, 200)
        self.assertEqual(self.delete(f"/api/students/{student_id}").status_code, 200)
        self.assertEqual(self.get(f"/api/students/{student_id}").status_code, 404)

        with Session(self.engine) as session:
            self.assertIsNone(session.get(Student, student_id))

    def test_repeated_reads_are_identical(self):
        self.create_student("Ann", "Lee", 1)
        self.create_student("Ben", "Orr", 2)
        self.assertEqual(self.get("/api/students").content, self.get("/api/students").content)
