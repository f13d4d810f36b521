"""
Error taxonomy shared by the API and the exam-session client.
"""


class ExamPortalError(Exception):
    """Base class for all domain errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ExamPortalError):
    """Missing or malformed request fields."""

    status_code = 400


class NotFoundError(ExamPortalError):
    status_code = 404


class AuthError(ExamPortalError):
    """Invalid credentials, rejected token or role mismatch."""

    status_code = 401

    def __init__(self, message: str, status_code: int = 401):
        super().__init__(message)
        self.status_code = status_code


class NetworkError(ExamPortalError):
    """Client-side request failure. The caller keeps its state."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class FetchError(NetworkError):
    """The assigned question set could not be loaded."""


class CaptureError(ExamPortalError):
    """The capture device could not be acquired."""
