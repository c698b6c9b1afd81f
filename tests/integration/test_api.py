# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the HTTP API.

The application runs with its real middleware, services and exception
handlers over an in-memory spreadsheet.
"""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from sheetlms.api.app import create_app
from sheetlms.core.config.settings import RateLimitSettings
from sheetlms.infrastructure.sheets.exceptions import RemoteUnavailableError


@pytest.fixture
def client(test_settings, seeded_transport) -> Iterator[TestClient]:
    """Test client over the seeded spreadsheet."""
    app = create_app(test_settings, transport=seeded_transport)
    with TestClient(app) as test_client:
        yield test_client


class TestHealth:
    """Tests for the health endpoint."""

    def test_health(self, client):
        """Test liveness reports without touching the spreadsheet."""
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["sheets_configured"] is False
        assert body["environment"] == "development"


class TestCoursesApi:
    """Tests for /api/courses."""

    def test_list_courses(self, client):
        """Test the envelope and pagination."""
        response = client.get("/api/courses", params={"limit": 1})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [course["id"] for course in body["data"]["courses"]] == ["C1"]
        assert body["data"]["courses"][0]["module_count"] == 2
        assert body["data"]["pagination"] == {
            "current_page": 1,
            "total_pages": 2,
            "total_items": 2,
            "items_per_page": 1,
        }

    def test_limit_out_of_range(self, client):
        """Test query validation failures are 400 with field errors."""
        response = client.get("/api/courses", params={"limit": 0})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation failed"
        assert body["errors"][0]["field"] == "limit"

    def test_categories(self, client):
        """Test unique categories."""
        response = client.get("/api/courses/categories")

        assert response.json()["data"]["categories"] == ["programming", "Art"]

    def test_course_detail(self, client):
        """Test ordered modules with lessons using the youtube_url name."""
        response = client.get("/api/courses/C1")

        assert response.status_code == 200
        modules = response.json()["data"]["modules"]
        assert [module["id"] for module in modules] == ["M1", "M2"]
        assert modules[0]["lessons"][0]["youtube_url"] == "https://youtu.be/1"

    def test_unknown_course(self, client):
        """Test 404 envelope."""
        response = client.get("/api/courses/nope")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Course not found"}

    def test_create_course_requires_auth(self, client):
        """Test anonymous authoring is rejected."""
        response = client.post("/api/courses", json={"title": "x"})

        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_create_course_requires_instructor(self, client, auth_header):
        """Test students cannot author courses."""
        response = client.post(
            "/api/courses",
            json={"title": "Go", "description": "d", "category": "c"},
            headers=auth_header("U1", "student"),
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Insufficient permissions"

    def test_create_course(self, client, auth_header, seeded_transport):
        """Test instructors create courses they own."""
        response = client.post(
            "/api/courses",
            json={"title": "Go", "description": "Gophers", "category": "programming"},
            headers=auth_header("I2", "instructor"),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Course created successfully"
        assert body["data"]["instructor_id"] == "I2"
        assert len(seeded_transport.data_rows("Courses")) == 3

    def test_create_course_missing_fields(self, client, auth_header):
        """Test every missing field is listed."""
        response = client.post(
            "/api/courses",
            json={"title": "Go"},
            headers=auth_header("A1", "admin"),
        )

        assert response.status_code == 400
        fields = {error["field"] for error in response.json()["errors"]}
        assert fields == {"description", "category"}

    def test_add_module(self, client, auth_header):
        """Test adding a module to a course."""
        response = client.post(
            "/api/courses/C2/modules",
            json={"title": "Shapes", "order": 1},
            headers=auth_header("I1", "instructor"),
        )

        assert response.status_code == 201
        assert response.json()["data"]["course_id"] == "C2"


class TestLessonsApi:
    """Tests for /api/lessons."""

    def test_lesson_detail_hides_answers(self, client):
        """Test questions come without answers and with navigation."""
        response = client.get("/api/lessons/L1")

        data = response.json()["data"]
        assert data["lesson"]["youtube_url"] == "https://youtu.be/1"
        assert data["navigation"]["next_lesson"]["id"] == "L2"
        assert all("correct_answer" not in quiz for quiz in data["quizzes"])

    def test_create_lesson(self, client, auth_header, seeded_transport):
        """Test creating a lesson."""
        response = client.post(
            "/api/lessons",
            json={"module_id": "M2", "title": "Mixins", "youtube_url": "https://youtu.be/9"},
            headers=auth_header("I1", "instructor"),
        )

        assert response.status_code == 201
        assert response.json()["message"] == "Lesson created successfully"
        assert seeded_transport.data_rows("Lessons")[-1][1:4] == ["M2", "Mixins", "https://youtu.be/9"]

    def test_create_lesson_unknown_module(self, client, auth_header):
        """Test a missing module is 404."""
        response = client.post(
            "/api/lessons",
            json={"module_id": "nope", "title": "x", "youtube_url": "https://youtu.be/9"},
            headers=auth_header("I1", "instructor"),
        )

        assert response.status_code == 404

    def test_add_quizzes(self, client, auth_header):
        """Test incomplete questions are skipped and counted."""
        response = client.post(
            "/api/lessons/L2/quizzes",
            json={
                "questions": [
                    {
                        "question": "x?",
                        "option_a": "1",
                        "option_b": "2",
                        "option_c": "3",
                        "option_d": "4",
                        "correct_answer": "b",
                    },
                    {"question": "incomplete"},
                ]
            },
            headers=auth_header("I1", "instructor"),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "1 quiz questions added successfully"
        assert len(body["data"]["quizzes"]) == 1


class TestQuizApi:
    """Tests for /api/quiz."""

    def test_list_questions(self, client):
        """Test questions of a lesson."""
        response = client.get("/api/quiz/lesson/L1")

        data = response.json()["data"]
        assert data["total"] == 4
        assert data["quizzes"][0]["options"]["b"] == "4"

    def test_submit_requires_auth(self, client, sample_answers):
        """Test anonymous submissions are rejected."""
        response = client.post(
            "/api/quiz/submit",
            json={"lesson_id": "L1", "answers": sample_answers("b")},
        )

        assert response.status_code == 401

    def test_submit_with_invalid_token(self, client, sample_answers, token_factory):
        """Test a token signed with another secret counts as anonymous."""
        token = token_factory("U1", secret="wrong-secret")

        response = client.post(
            "/api/quiz/submit",
            json={"lesson_id": "L1", "answers": sample_answers("b")},
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 401

    def test_submit_and_read_progress(self, client, auth_header, sample_answers, seeded_transport):
        """Test a passing submission is reflected in progress."""
        headers = auth_header("U1")

        response = client.post(
            "/api/quiz/submit",
            json={"lesson_id": "L1", "answers": sample_answers("b", "c", "a", "d")},
            headers=headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Congratulations! You passed the quiz!"
        assert body["data"]["score"] == 100
        assert body["data"]["status"] == "completed"

        progress = client.get("/api/progress/course/C1", headers=headers).json()["data"]
        assert progress["statistics"]["completed_lessons"] == 1
        assert progress["module_progress"][0]["lessons"][0]["progress"]["score"] == 100

    def test_resubmit_keeps_single_row(self, client, auth_header, sample_answers, seeded_transport):
        """Test resubmitting overwrites the progress row."""
        headers = auth_header("U1")
        for letters in (("b", "c", "a", "d"), ("a", "a", "b", "a")):
            client.post(
                "/api/quiz/submit",
                json={"lesson_id": "L1", "answers": sample_answers(*letters)},
                headers=headers,
            )

        rows = seeded_transport.data_rows("User_Progress")
        assert len(rows) == 1
        assert rows[0][3:5] == ["0", "ongoing"]

    def test_submit_echoes_letters_as_sent(self, client, auth_header, sample_answers):
        """Test results show the letters exactly as the client sent them."""
        response = client.post(
            "/api/quiz/submit",
            json={"lesson_id": "L1", "answers": sample_answers("B", "C", "a", "d")},
            headers=auth_header("U1"),
        )

        results = response.json()["data"]["results"]
        assert [item["selected_answer"] for item in results] == ["B", "C", "a", "d"]
        assert all(item["is_correct"] for item in results)

    def test_submit_lesson_without_questions(self, client, auth_header, sample_answers):
        """Test a lesson without questions is a 400."""
        response = client.post(
            "/api/quiz/submit",
            json={"lesson_id": "L2", "answers": sample_answers("a")},
            headers=auth_header("U1"),
        )

        assert response.status_code == 400
        assert response.json()["message"] == "No quiz questions found for this lesson"

    def test_submit_empty_answers(self, client, auth_header):
        """Test an empty answer list fails validation."""
        response = client.post(
            "/api/quiz/submit",
            json={"lesson_id": "L1", "answers": []},
            headers=auth_header("U1"),
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "answers"

    def test_remote_failure_is_500(self, client, auth_header, sample_answers, seeded_transport):
        """Test spreadsheet outages become a generic 500."""
        seeded_transport.fail_with = RemoteUnavailableError("Sheets down", status_code=503)

        response = client.post(
            "/api/quiz/submit",
            json={"lesson_id": "L1", "answers": sample_answers("b")},
            headers=auth_header("U1"),
        )

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Internal server error"}


class TestUnexpectedErrors:
    """Tests for failures outside the known error taxonomy."""

    def test_unexpected_error_uses_envelope(self, test_settings, seeded_transport, auth_header, sample_answers):
        """Test an unanticipated exception still returns the JSON envelope."""
        app = create_app(test_settings, transport=seeded_transport)
        seeded_transport.fail_with = RuntimeError("boom")

        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.post(
                "/api/quiz/submit",
                json={"lesson_id": "L1", "answers": sample_answers("b")},
                headers=auth_header("U1"),
            )

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Internal server error"}

    def test_garbled_score_cell_does_not_break_submission(
        self, client, auth_header, sample_answers, seeded_transport
    ):
        """Test another learner's overflowing score cell leaves submissions working."""
        seeded_transport.sheets["User_Progress"].append(
            ["P-bad", "U2", "L1", "inf", "completed", ""]
        )

        response = client.post(
            "/api/quiz/submit",
            json={"lesson_id": "L1", "answers": sample_answers("b", "c", "a", "d")},
            headers=auth_header("U1"),
        )

        assert response.status_code == 200
        assert response.json()["data"]["score"] == 100


class TestProgressApi:
    """Tests for /api/progress."""

    def test_own_progress(self, client, auth_header):
        """Test learners read their own report."""
        response = client.get("/api/progress/U1", headers=auth_header("U1"))

        assert response.status_code == 200
        assert response.json()["data"]["statistics"]["total_lessons"] == 3

    def test_other_user_forbidden(self, client, auth_header):
        """Test learners cannot read others' reports."""
        response = client.get("/api/progress/U2", headers=auth_header("U1"))

        assert response.status_code == 403
        assert response.json()["message"] == "You can only view your own progress"

    def test_admin_reads_others(self, client, auth_header):
        """Test admins read any report."""
        response = client.get("/api/progress/U2", headers=auth_header("A1", "admin"))

        assert response.status_code == 200

    def test_course_progress_unknown_course(self, client, auth_header):
        """Test 404 for a missing course."""
        response = client.get("/api/progress/course/nope", headers=auth_header("U1"))

        assert response.status_code == 404


class TestRateLimit:
    """Tests for request rate limiting."""

    def test_exceeding_limit_returns_429(self, test_settings, seeded_transport):
        """Test the limit applies per client."""
        settings = test_settings.model_copy(
            update={"rate_limit": RateLimitSettings(enabled=True, requests_per_minute=2)}
        )
        app = create_app(settings, transport=seeded_transport)

        with TestClient(app) as client:
            statuses = [client.get("/api/courses").status_code for _ in range(3)]
            response = client.get("/api/courses")

        assert statuses == [200, 200, 429]
        assert response.status_code == 429
        assert response.headers["Retry-After"] == "60"
        assert response.json()["success"] is False
