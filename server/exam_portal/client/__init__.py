"""
Exam-taking client: API access, auth context and the timed session controller.
"""
from exam_portal.client.api import ExamApiClient
from exam_portal.client.auth import AuthContext
from exam_portal.client.capture import CaptureDevice
from exam_portal.client.session import ExamSession, SessionState

__all__ = [
    "ExamApiClient",
    "AuthContext",
    "CaptureDevice",
    "ExamSession",
    "SessionState",
]
