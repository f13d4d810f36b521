"""
Async HTTP client for the exam portal REST API.
"""
import logging
from typing import List, Optional

import httpx

from exam_portal.config import settings
from exam_portal.errors import AuthError, FetchError, NetworkError
from exam_portal.schemas import (
    QuestionResponse,
    StudentSubmissions,
    SubmissionCreate,
    TokenResponse,
)

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP error! status: {response.status_code}"


class ExamApiClient:
    """Thin wrapper around httpx.AsyncClient. Every failure is raised, never retried."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=timeout,
            transport=transport,
        )
        if token:
            self.set_token(token)

    def set_token(self, token: Optional[str]) -> None:
        if token:
            self._client.headers["Authorization"] = f"Bearer {token}"
        else:
            self._client.headers.pop("Authorization", None)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def _request(self, method: str, url: str, error_cls=NetworkError, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise error_cls(f"Request failed: {e}") from e
        if response.is_error:
            raise error_cls(_error_message(response), status_code=response.status_code)
        return response

    async def fetch_assigned_questions(self, email: str) -> List[QuestionResponse]:
        response = await self._request(
            "GET", "/api/questions/getquestions", error_cls=FetchError, params={"email": email}
        )
        return [QuestionResponse.model_validate(item) for item in response.json()]

    async def submit_exam(self, submission: SubmissionCreate) -> str:
        """Post one submission; returns the stored id."""
        response = await self._request(
            "POST",
            "/api/submission/submit",
            json=submission.model_dump(mode="json", by_alias=True),
        )
        return response.json()["id"]

    async def login(self, email: str, password: str) -> TokenResponse:
        try:
            response = await self._request(
                "POST", "/api/auth/login", json={"email": email, "password": password}
            )
        except NetworkError as e:
            if e.status_code == 401:
                raise AuthError(e.message) from e
            raise
        return TokenResponse.model_validate(response.json())

    async def register(self, name: str, email: str, password: str, role: str) -> TokenResponse:
        response = await self._request(
            "POST",
            "/api/auth/register",
            json={"name": name, "email": email, "password": password, "role": role},
        )
        return TokenResponse.model_validate(response.json())

    async def fetch_monitoring(self) -> List[StudentSubmissions]:
        response = await self._request("GET", "/api/submission/monitoring")
        return [StudentSubmissions.model_validate(item) for item in response.json()]

    async def delete_submission(self, submission_id: str) -> None:
        await self._request("DELETE", f"/api/submission/delete/{submission_id}")
