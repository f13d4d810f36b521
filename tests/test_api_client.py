import json

import httpx
import pytest

from exam_portal.client import AuthContext, ExamApiClient
from exam_portal.errors import AuthError, FetchError, NetworkError
from exam_portal.models.user import UserRole
from exam_portal.schemas import AnswerEntry, SubmissionCreate


QUESTION = {
    "id": "q1",
    "questionText": "2 + 2?",
    "type": "mcq",
    "options": ["3", "4"],
    "correctAnswer": "4",
    "assignedToEmails": ["alice@example.com"],
}


def api_with(handler):
    return ExamApiClient(base_url="http://exam.test", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_assigned_questions_sends_email():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["email"] = request.url.params.get("email")
        return httpx.Response(200, json=[QUESTION])

    async with api_with(handler) as api:
        questions = await api.fetch_assigned_questions("alice@example.com")

    assert seen == {"path": "/api/questions/getquestions", "email": "alice@example.com"}
    assert questions[0].id == "q1"
    assert questions[0].options == ["3", "4"]


@pytest.mark.asyncio
async def test_fetch_failure_raises_fetch_error_with_server_message():
    def handler(request):
        return httpx.Response(500, json={"error": "database down"})

    async with api_with(handler) as api:
        with pytest.raises(FetchError) as excinfo:
            await api.fetch_assigned_questions("alice@example.com")

    assert excinfo.value.message == "database down"
    assert excinfo.value.status_code == 500


@pytest.mark.asyncio
async def test_submit_posts_camel_case_body():
    captured = {}

    def handler(request):
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"message": "Submission successful", "id": "sub-1"})

    submission = SubmissionCreate(
        student_email="alice@example.com",
        answers=[AnswerEntry(question_id="q1", answer="4")],
    )
    async with api_with(handler) as api:
        assert await api.submit_exam(submission) == "sub-1"

    body = captured["body"]
    assert body["studentEmail"] == "alice@example.com"
    assert body["answers"] == [{"questionId": "q1", "answer": "4"}]
    assert body["snapshots"] == []


@pytest.mark.asyncio
async def test_connection_error_becomes_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    submission = SubmissionCreate(student_email="a@b.c", answers=[AnswerEntry(question_id="q1")])
    async with api_with(handler) as api:
        with pytest.raises(NetworkError):
            await api.submit_exam(submission)


@pytest.mark.asyncio
async def test_login_with_bad_credentials_is_auth_error():
    def handler(request):
        return httpx.Response(401, json={"error": "Invalid email or password"})

    async with api_with(handler) as api:
        with pytest.raises(AuthError):
            await api.login("alice@example.com", "wrong")


def login_handler(role):
    def handler(request):
        if request.url.path == "/api/auth/login":
            return httpx.Response(200, json={"token": "tok", "email": "alice@example.com", "role": role})
        return httpx.Response(200, json={"auth": request.headers.get("Authorization")})
    return handler


@pytest.mark.asyncio
async def test_auth_context_keeps_identity_and_sets_bearer_header():
    async with api_with(login_handler("student")) as api:
        auth = AuthContext(api)
        await auth.login("alice@example.com", "pw", expected_role=UserRole.STUDENT)

        assert auth.is_authenticated
        assert auth.email == "alice@example.com"
        assert api._client.headers["Authorization"] == "Bearer tok"

        await auth.logout()
        assert not auth.is_authenticated
        assert auth.email is None
        assert "Authorization" not in api._client.headers


@pytest.mark.asyncio
async def test_auth_context_rejects_cross_role_login():
    async with api_with(login_handler("teacher")) as api:
        auth = AuthContext(api)
        with pytest.raises(AuthError):
            await auth.login("alice@example.com", "pw", expected_role=UserRole.STUDENT)
        assert not auth.is_authenticated
