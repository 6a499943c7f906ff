"""Router tests: FastAPI TestClient over an in-memory database and a stubbed model."""
import json

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from worksheetgen.cache import WorksheetCache
from worksheetgen.db import Base, get_db
from worksheetgen.errors import ConfigError
from worksheetgen.generator import WorksheetGenerator
from worksheetgen.main import app
from worksheetgen.routers.worksheets import get_generator
from worksheetgen.settings import settings


def _token(user_id="student-1") -> dict:
    token = jwt.encode({"sub": user_id}, settings.auth_jwt_secret, algorithm=settings.auth_jwt_algorithm)
    return {"Authorization": f"Bearer {token}"}


async def _no_sleep(seconds):
    return None


@pytest.fixture
def api(stub_client, mc_worksheet_json):
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    def _get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    client = stub_client(mc_worksheet_json(5))
    generator = WorksheetGenerator(client, WorksheetCache(), sleep=_no_sleep)
    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_generator] = lambda: generator
    yield TestClient(app), client
    app.dependency_overrides.clear()


GENERATE_BODY = {
    "grade": "1",
    "subject_type": "grammar",
    "topics": [{"id": "nouns", "name": "Nouns"}],
    "difficulty": "easy",
    "question_types": ["multiple-choice"],
    "question_count": 5,
    "include_answer_key": True,
}


def _save_body(**overrides):
    body = {
        "grade": "1",
        "subject_type": "grammar",
        "difficulty": "easy",
        "topic_ids": ["nouns"],
        "title": "Nouns Practice",
        "instructions": "Choose the best answer.",
        "questions": [
            {"id": "1", "type": "multiple-choice", "question": "Which is a noun?",
             "options": ["dog", "run", "blue", "fast"], "correct_answer": "dog", "points": 2},
            {"id": "2", "type": "fill-blank", "question": "A ___ meows.", "correct_answer": "cat", "points": 2},
        ],
        "answer_key": {"1": "dog", "2": "cat"},
    }
    body.update(overrides)
    return body


class TestPublicEndpoints:
    def test_info(self, api):
        http, _ = api
        r = http.get("/info")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"

    def test_topics(self, api):
        http, _ = api
        r = http.get("/topics/k/vocabulary")
        assert r.status_code == 200
        assert any(t["id"] == "colors" for t in r.json())

    def test_unknown_grade_topics(self, api):
        http, _ = api
        assert http.get("/topics/13/grammar").status_code == 404


class TestAuth:
    def test_missing_token(self, api):
        http, _ = api
        assert http.post("/worksheets/generate", json=GENERATE_BODY).status_code == 401

    def test_bad_token(self, api):
        http, _ = api
        r = http.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert r.status_code == 401

    def test_me(self, api):
        http, _ = api
        r = http.get("/auth/me", headers=_token("abc"))
        assert r.json()["user_id"] == "abc"


class TestGenerateEndpoint:
    def test_generate(self, api):
        http, client = api
        r = http.post("/worksheets/generate", json=GENERATE_BODY, headers=_token())
        assert r.status_code == 200
        data = r.json()
        assert len(data["questions"]) == 5
        assert len(data["answer_key"]) == 5
        assert data["fallback"] is False
        assert len(client.prompts) == 1

    def test_invalid_request(self, api):
        http, _ = api
        body = dict(GENERATE_BODY, question_count=50)
        assert http.post("/worksheets/generate", json=body, headers=_token()).status_code == 422

    def test_unknown_topic_is_400(self, api):
        http, client = api
        body = dict(GENERATE_BODY, topics=[{"id": "made-up", "name": "Made Up"}])
        r = http.post("/worksheets/generate", json=body, headers=_token())
        assert r.status_code == 400
        assert "made-up" in r.json()["detail"]
        assert client.prompts == []

    def test_topic_from_another_grade_is_400(self, api):
        http, _ = api
        body = dict(GENERATE_BODY, grade="5")
        assert http.post("/worksheets/generate", json=body, headers=_token()).status_code == 400

    def test_missing_api_key_is_503(self, api):
        http, client = api
        client.outcomes = [ConfigError("GEMINI_API_KEY is not configured")]
        r = http.post("/worksheets/generate", json=GENERATE_BODY, headers=_token())
        assert r.status_code == 503

    def test_export_pdf(self, api):
        http, _ = api
        ws = http.post("/worksheets/generate", json=GENERATE_BODY, headers=_token()).json()
        r = http.post("/worksheets/export/pdf", json={"worksheet": ws, "include_answer_key": True}, headers=_token())
        assert r.status_code == 200
        assert r.headers["content-type"] == "application/pdf"
        assert r.content.startswith(b"%PDF")


class TestSavedWorksheets:
    def test_save_get_list_delete(self, api):
        http, _ = api
        created = http.post("/worksheets", json=_save_body(), headers=_token())
        assert created.status_code == 201
        wid = created.json()["id"]

        fetched = http.get(f"/worksheets/{wid}", headers=_token())
        assert fetched.status_code == 200
        assert fetched.json()["title"] == "Nouns Practice"
        assert fetched.json()["progress"] is None

        listed = http.get("/worksheets", params={"grade": "1", "topic": "nouns"}, headers=_token())
        assert [w["id"] for w in listed.json()] == [wid]
        assert http.get("/worksheets", params={"difficulty": "hard"}, headers=_token()).json() == []

        assert http.delete(f"/worksheets/{wid}", headers=_token()).json() == {"ok": True}
        assert http.get(f"/worksheets/{wid}", headers=_token()).status_code == 404

    def test_other_users_cannot_see_worksheet(self, api):
        http, _ = api
        wid = http.post("/worksheets", json=_save_body(), headers=_token("owner")).json()["id"]
        assert http.get(f"/worksheets/{wid}", headers=_token("intruder")).status_code == 404
        assert http.delete(f"/worksheets/{wid}", headers=_token("intruder")).status_code == 404

    def test_invalid_multiple_choice_is_rejected(self, api):
        http, _ = api
        body = _save_body()
        body["questions"][0]["correct_answer"] = "chair"
        assert http.post("/worksheets", json=body, headers=_token()).status_code == 422

    def test_unknown_topic_id_is_rejected(self, api):
        http, _ = api
        body = _save_body(topic_ids=["nouns", "made-up"])
        assert http.post("/worksheets", json=body, headers=_token()).status_code == 400

    def test_saved_pdf(self, api):
        http, _ = api
        wid = http.post("/worksheets", json=_save_body(), headers=_token()).json()["id"]
        r = http.get(f"/worksheets/{wid}/pdf", params={"answer_key": "true"}, headers=_token())
        assert r.status_code == 200
        assert r.content.startswith(b"%PDF")


class TestSubmitAndProgress:
    def test_local_scoring_records_progress(self, api):
        http, _ = api
        wid = http.post("/worksheets", json=_save_body(), headers=_token()).json()["id"]

        r = http.post(f"/worksheets/{wid}/submit", json={"answers": {"1": "Dog", "2": "dog"}, "time_spent_seconds": 90},
                      headers=_token())
        assert r.status_code == 200
        assert r.json()["score"] == 50
        assert r.json()["correct_count"] == 1

        progress = http.get("/progress", headers=_token()).json()
        assert len(progress) == 1
        assert progress[0]["worksheet_id"] == wid
        assert progress[0]["answered_questions"] == 2
        assert progress[0]["time_spent_seconds"] == 90

        summary = http.get("/progress/summary", headers=_token()).json()
        assert summary == {
            "worksheets_attempted": 1,
            "worksheets_completed": 1,
            "average_score": 50.0,
            "by_subject": {"grammar": 50.0},
        }
        completed = http.get("/worksheets", params={"completed": "true"}, headers=_token()).json()
        assert [w["id"] for w in completed] == [wid]

    def test_resubmission_overwrites_progress(self, api):
        http, _ = api
        wid = http.post("/worksheets", json=_save_body(), headers=_token()).json()["id"]
        http.post(f"/worksheets/{wid}/submit", json={"answers": {}}, headers=_token())
        http.post(f"/worksheets/{wid}/submit", json={"answers": {"1": "dog", "2": "cat"}}, headers=_token())
        progress = http.get("/progress", headers=_token()).json()
        assert len(progress) == 1
        assert progress[0]["score"] == 100

    def test_ai_grading(self, api):
        http, client = api
        wid = http.post("/worksheets", json=_save_body(), headers=_token()).json()["id"]
        client.outcomes = [json.dumps({
            "overallFeedback": "Good effort",
            "gradedAnswers": [
                {"questionId": "1", "isCorrect": True, "feedback": "Right"},
                {"questionId": "2", "isCorrect": False, "feedback": "Cats meow"},
            ],
            "score": 50,
        })]
        r = http.post(f"/worksheets/{wid}/submit", json={"answers": {"1": "dog", "2": "bird"}, "use_ai_grading": True},
                      headers=_token())
        assert r.json()["overall_feedback"] == "Good effort"
        assert r.json()["score"] == 50

    def test_ai_grading_falls_back_to_local(self, api):
        http, client = api
        wid = http.post("/worksheets", json=_save_body(), headers=_token()).json()["id"]
        client.outcomes = [ConfigError("GEMINI_API_KEY is not configured")]
        r = http.post(f"/worksheets/{wid}/submit", json={"answers": {"1": "dog", "2": "cat"}, "use_ai_grading": True},
                      headers=_token())
        assert r.status_code == 200
        assert r.json()["score"] == 100
