"""Teacher API 통합 테스트 (배치/퀴즈 출제, 대시보드, AI 초안)"""
import pytest
from unittest.mock import AsyncMock, patch

from quizdesk.models.user import UserRole
from quizdesk.schemas.ai import AIQuizDraft, AIQuizDraftQuestion
from tests.factories import auth_headers, make_batch, make_quiz, make_user


def quiz_payload(batch_id: int, **overrides):
    payload = {
        "title": "1주차 퀴즈",
        "batchId": batch_id,
        "deadline": "2099-01-01T00:00:00Z",
        "duration": 20,
        "questions": [
            {"question": "HTTP 기본 포트는?", "options": ["21", "80", "443"], "correctAnswer": "80", "explanation": "HTTP"},
            {"question": "HTTPS 기본 포트는?", "options": ["80", "443"], "correctAnswer": "443"},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_create_batch_and_duplicate_name(client, teacher):
    headers = auth_headers(teacher)
    response = await client.post("/api/teacher/create-batch", json={"name": "웹반"}, headers=headers)
    assert response.status_code == 201
    assert response.json()["batch"]["teacher_id"] == teacher.id

    response = await client.post("/api/teacher/create-batch", json={"name": "웹반"}, headers=headers)
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_create_batch_invalidates_all_batches_cache(client, teacher, student, fake_cache):
    await client.get("/api/student/batches", headers=auth_headers(student))
    assert "allBatches" in fake_cache.store

    await client.post("/api/teacher/create-batch", json={"name": "새반"}, headers=auth_headers(teacher))
    assert "allBatches" not in fake_cache.store

    data = (await client.get("/api/student/batches", headers=auth_headers(student))).json()
    assert [b["name"] for b in data] == ["새반"]


@pytest.mark.asyncio
async def test_create_batch_refreshes_leaderboard_batch_options(client, test_db_session, teacher, fake_cache):
    batch = await make_batch(test_db_session, "기존반", teacher)
    await make_quiz(test_db_session, teacher, batch)
    headers = auth_headers(teacher)

    board = (await client.get("/api/teacher/leaderboard", headers=headers)).json()
    assert [o["name"] for o in board["batch_options"]] == ["기존반"]
    assert f"leaderboard:{teacher.id}:all:all" in fake_cache.store

    await client.post("/api/teacher/create-batch", json={"name": "신규반"}, headers=headers)
    assert f"leaderboard:{teacher.id}:all:all" not in fake_cache.store

    board = (await client.get("/api/teacher/leaderboard", headers=headers)).json()
    assert {o["name"] for o in board["batch_options"]} == {"기존반", "신규반"}


@pytest.mark.asyncio
async def test_create_quiz_converts_answers_and_refreshes_listing(client, test_db_session, teacher):
    batch = await make_batch(test_db_session, "네트워크반", teacher)
    headers = auth_headers(teacher)

    listing = (await client.get("/api/teacher/quizzes", headers=headers)).json()
    assert listing["total"] == 0

    response = await client.post("/api/teacher/create-quiz", json=quiz_payload(batch.id), headers=headers)
    assert response.status_code == 201
    quiz = response.json()
    assert [q["correct_answer"] for q in quiz["questions"]] == [1, 1]
    assert quiz["source"] == "manual"
    assert quiz["duration"] == 20

    listing = (await client.get("/api/teacher/quizzes", headers=headers)).json()
    assert listing["total"] == 1
    assert listing["quizzes"][0]["batch_name"] == "네트워크반"


@pytest.mark.asyncio
async def test_create_quiz_invalid_answer_rejected(client, test_db_session, teacher):
    """정답이 선택지에 없으면 400, 아무 것도 저장되지 않음"""
    batch = await make_batch(test_db_session, "보안반", teacher)
    headers = auth_headers(teacher)
    payload = quiz_payload(batch.id, questions=[
        {"question": "ok", "options": ["a", "b"], "correctAnswer": "a"},
        {"question": "bad", "options": ["a", "b"], "correctAnswer": "z"},
    ])

    response = await client.post("/api/teacher/create-quiz", json=payload, headers=headers)
    assert response.status_code == 400
    assert response.json()["kind"] == "validation"
    assert "2번" in response.json()["detail"]

    listing = (await client.get("/api/teacher/quizzes", headers=headers)).json()
    assert listing["total"] == 0


@pytest.mark.asyncio
async def test_create_quiz_in_other_teachers_batch(client, test_db_session, teacher):
    other = await make_user(test_db_session, "정교사", "jung@example.com", UserRole.TEACHER)
    batch = await make_batch(test_db_session, "남의반", other)

    response = await client.post("/api/teacher/create-quiz", json=quiz_payload(batch.id), headers=auth_headers(teacher))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_publish_quiz_draft(client, test_db_session, teacher):
    batch = await make_batch(test_db_session, "AI반", teacher)
    payload = {
        "batchId": batch.id,
        "quiz": {
            "title": "AI 생성 퀴즈",
            "deadline": "",
            "questions": [{"question": "q", "options": ["a", "b", "c"], "correct": 2, "explanation": "c"}],
        },
    }

    response = await client.post("/api/teacher/publish-quiz", json=payload, headers=auth_headers(teacher))
    assert response.status_code == 201
    data = response.json()
    assert data["source"] == "ai"
    assert data["deadline"] is None
    assert data["questions"][0]["correct_answer"] == 2


@pytest.mark.asyncio
async def test_publish_quiz_without_questions(client, test_db_session, teacher):
    batch = await make_batch(test_db_session, "빈반", teacher)
    payload = {"batchId": batch.id, "quiz": {"title": "빈 초안", "questions": []}}

    response = await client.post("/api/teacher/publish-quiz", json=payload, headers=auth_headers(teacher))
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_dashboard(client, test_db_session, teacher):
    s1 = await make_user(test_db_session, "학생1", "s1@example.com", UserRole.STUDENT)
    s2 = await make_user(test_db_session, "학생2", "s2@example.com", UserRole.STUDENT)
    batch_a = await make_batch(test_db_session, "A", teacher, students=[s1, s2])
    batch_b = await make_batch(test_db_session, "B", teacher, students=[s1])
    await make_quiz(test_db_session, teacher, batch_a, title="A 퀴즈")
    await make_quiz(test_db_session, teacher, batch_b, title="B 퀴즈")

    data = (await client.get("/api/teacher/dashboard", headers=auth_headers(teacher))).json()
    assert data["metrics"] == {"total_quizzes": 2, "active_students": 2, "avg_score": 0, "total_batches": 2}
    assert {q["batch"]: q["students"] for q in data["quizzes"]} == {"A": 2, "B": 1}


@pytest.mark.asyncio
async def test_leaderboard_other_teachers_batch(client, test_db_session, teacher):
    other = await make_user(test_db_session, "정교사", "jung@example.com", UserRole.TEACHER)
    batch = await make_batch(test_db_session, "남의반", other)

    response = await client.get(f"/api/teacher/leaderboard?batch_id={batch.id}", headers=auth_headers(teacher))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_leaderboard_empty(client, teacher):
    data = (await client.get("/api/teacher/leaderboard", headers=auth_headers(teacher))).json()
    assert data == {"leaderboard": [], "quiz_options": [], "batch_options": []}


@pytest.mark.asyncio
async def test_upload_and_generate(client, teacher):
    """PDF 업로드 → 텍스트 추출 → AI 초안 (저장하지 않음)"""
    draft = AIQuizDraft(
        title="세포",
        questions=[AIQuizDraftQuestion(question="세포의 기본 단위는?", options=["세포", "원자"], correct=0)],
    )
    with patch("quizdesk.services.pdf_service.extract_text", return_value="세포는 생명의 기본 단위") as mock_extract, \
         patch("quizdesk.services.ai_service.generate_quiz_draft", new_callable=AsyncMock, return_value=draft):
        response = await client.post(
            "/api/teacher/upload-and-generate",
            files={"file": ("notes.pdf", b"%PDF-1.4 fake", "application/pdf")},
            data={"batchId": "3"},
            headers=auth_headers(teacher),
        )

    assert response.status_code == 200
    data = response.json()
    assert data["batch_id"] == 3
    assert data["quiz"]["title"] == "세포"
    mock_extract.assert_called_once_with(b"%PDF-1.4 fake")


@pytest.mark.asyncio
async def test_upload_rejects_non_pdf(client, teacher):
    response = await client.post(
        "/api/teacher/upload-and-generate",
        files={"file": ("notes.txt", b"plain text", "text/plain")},
        data={"batchId": "3"},
        headers=auth_headers(teacher),
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_ask_question(client, student):
    with patch("quizdesk.services.ai_service._generate", new_callable=AsyncMock, return_value="답변입니다"):
        response = await client.post(
            "/api/ai/ask-question",
            json={"question": "광합성이란?"},
            headers=auth_headers(student),
        )
    assert response.status_code == 200
    assert response.json() == {"answer": "답변입니다", "cached": False}
