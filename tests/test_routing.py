from svalutation.models import Remark

from .base import APITestCase


class TestRouting(APITestCase):
    def test_unmatched_path(self):
        self.assertEqual(self.get("/api/classes").status_code, 404)
        self.assertEqual(self.client.get("/nowhere").status_code, 404)

    def test_unsupported_method(self):
        self.assertEqual(self.client.put("/api/students/1", auth=self.auth).status_code, 405)
        self.assertEqual(self.client.delete("/api/students", auth=self.auth).status_code, 405)
        self.assertEqual(self.client.post("/api/observations/student/1", auth=self.auth).status_code, 405)
        self.assertEqual(self.client.post("/status").status_code, 405)

    def test_non_numeric_id_matches_nothing(self):
        for resource in ("students", "teachers", "remarks", "observations"):
            with self.subTest(resource=resource):
                response = self.get(f"/api/{resource}/abc")
                self.assertEqual(response.status_code, 404)
                self.assertEqual(response.headers["content-type"].split(";")[0], "text/plain")
                self.assertEqual(self.patch(f"/api/{resource}/abc", {}).status_code, 404)
                self.assertEqual(self.delete(f"/api/{resource}/abc").status_code, 200)

    def test_non_numeric_filter_id_lists_nothing(self):
        self.create_student(class_id=1)
        for url in ("/api/students/class/abc",
                    "/api/observations/student/abc",
                    "/api/observations/teacher/1x",
                    "/api/observations/teacher/abc/student/1"):
            with self.subTest(url=url):
                response = self.get(url)
                self.assertEqual(response.status_code, 200)
                self.assertEqual(response.json(), [])

    def test_non_numeric_delete_leaves_rows(self):
        student_id = self.create_student()
        self.assertEqual(self.delete(f"/api/students/{student_id}x").status_code, 200)
        self.assertEqual(self.get(f"/api/students/{student_id}").status_code, 200)

    def test_errors_are_plain_text(self):
        response = self.get("/api/remarks/12345")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.headers["content-type"].split(";")[0], "text/plain")
        self.assertEqual(response.text, "Remark not found")

    def test_storage_failure_is_plain_text_500(self):
        Remark.__table__.drop(self.engine)

        response = self.get("/api/remarks")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.headers["content-type"].split(";")[0], "text/plain")
        self.assertIn("no such table", response.text)

        response = self.post("/api/remarks", {"skill": "reading", "level": 2})
        self.assertEqual(response.status_code, 500)
        self.assertIn("remarks", response.text)

        # the next request gets a working session
        student_id = self.create_student()
        response = self.get("/api/students")
        self.assertEqual(response.status_code, 200)
        self.assertEqual([s["id"] for s in response.json()], [student_id])
