from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Any
from datetime import datetime, timezone
from exam_portal.models.user import UserRole
from exam_portal.models.content import QuestionType, Difficulty
from exam_portal.services.scoring import ScoreBreakdown


BOOLEAN_OPTIONS = ["True", "False"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class CamelModel(BaseModel):
    """Base for every JSON body exchanged with the web client (camelCase on the wire)."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class MessageResponse(BaseModel):
    message: str


# Question Schemas
class QuestionBase(CamelModel):
    question_text: str = Field(min_length=1)
    type: QuestionType = QuestionType.MCQ
    options: List[str] = []
    correct_answer: str = Field(min_length=1)
    subject: Optional[str] = None
    difficulty: Difficulty = Difficulty.MEDIUM
    tags: List[str] = []
    assigned_to_emails: List[str] = []

    @field_validator("assigned_to_emails")
    @classmethod
    def normalize_emails(cls, value: List[str]) -> List[str]:
        # Matches the lowercased email issued at login
        return [normalize_email(email) for email in value]

    @model_validator(mode="after")
    def check_correct_answer(self):
        if self.type == QuestionType.BOOLEAN and not self.options:
            self.options = list(BOOLEAN_OPTIONS)
        if self.type == QuestionType.MCQ and not self.options:
            raise ValueError("mcq questions need at least one option")
        if self.type != QuestionType.SHORT and self.correct_answer not in self.options:
            raise ValueError("correctAnswer must be one of the options")
        return self


class QuestionCreate(QuestionBase):
    pass


class QuestionUpdate(CamelModel):
    """Partial update; unset fields keep their stored value."""
    question_text: Optional[str] = None
    type: Optional[QuestionType] = None
    options: Optional[List[str]] = None
    correct_answer: Optional[str] = None
    subject: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    tags: Optional[List[str]] = None
    assigned_to_emails: Optional[List[str]] = None


class QuestionResponse(QuestionBase):
    id: str
    created_at: Optional[datetime] = None


class BulkQuestionsRequest(BaseModel):
    questions: List[QuestionCreate] = Field(min_length=1)


# Submission Schemas
class AnswerEntry(CamelModel):
    question_id: str = Field(min_length=1)
    answer: str = ""

    @field_validator("answer", mode="before")
    @classmethod
    def answer_as_string(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""


class SnapshotEntry(CamelModel):
    image: str = ""
    timestamp: datetime = Field(default_factory=utcnow)

    @field_validator("image", mode="before")
    @classmethod
    def image_as_string(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("timestamp", mode="before")
    @classmethod
    def timestamp_or_now(cls, value: Any) -> Any:
        return value or utcnow()


class SubmissionCreate(CamelModel):
    """Body of POST /api/submission/submit."""
    student_email: str = Field(min_length=1)
    answers: List[AnswerEntry] = Field(min_length=1)
    snapshots: List[SnapshotEntry] = []
    submitted_at: Optional[datetime] = None

    @field_validator("snapshots", mode="before")
    @classmethod
    def snapshots_as_list(cls, value: Any) -> Any:
        return value if isinstance(value, list) else []


class SubmitResponse(CamelModel):
    message: str
    id: str


class SubmissionRecord(CamelModel):
    id: str
    student_email: str
    answers: List[AnswerEntry]
    snapshots: List[SnapshotEntry]
    submitted_at: datetime


class JoinedQuestion(CamelModel):
    id: str
    question_text: str
    correct_answer: str


class EnrichedAnswer(AnswerEntry):
    question: Optional[JoinedQuestion] = None


class EnrichedSubmission(CamelModel):
    id: str
    student_email: str
    answers: List[EnrichedAnswer]
    snapshots: List[SnapshotEntry]
    submitted_at: datetime


class ScoredSubmission(EnrichedSubmission):
    stats: ScoreBreakdown


class StudentSubmissions(CamelModel):
    """All scored submissions of one student, for the monitoring panel."""
    student_email: str
    submission_count: int
    submissions: List[ScoredSubmission]


# Auth Schemas
class RegisterRequest(CamelModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)
    role: UserRole = UserRole.STUDENT


class LoginRequest(CamelModel):
    email: str
    password: str


class TokenResponse(CamelModel):
    token: str
    email: str
    role: UserRole


class ProfileResponse(CamelModel):
    email: str
    role: UserRole
