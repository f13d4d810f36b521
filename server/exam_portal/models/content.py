from sqlalchemy import Column, String, Text, JSON, Enum as SQLEnum
from datetime import datetime, timezone
from exam_portal.database import Base, UTCDateTime
import enum
import uuid


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


class QuestionType(str, enum.Enum):
    MCQ = "mcq"
    BOOLEAN = "boolean"
    SHORT = "short"


class Difficulty(str, enum.Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class Question(Base):
    """Exam question assigned to a list of student emails"""
    __tablename__ = "questions"

    id = Column(String(32), primary_key=True, default=new_id)
    question_text = Column(Text, nullable=False)
    type = Column(SQLEnum(QuestionType), nullable=False, default=QuestionType.MCQ)
    options = Column(JSON, nullable=False, default=list)  # ["Paris", "Rome", ...]
    correct_answer = Column(Text, nullable=False)
    subject = Column(String, nullable=True)
    difficulty = Column(SQLEnum(Difficulty), nullable=False, default=Difficulty.MEDIUM)
    tags = Column(JSON, nullable=False, default=list)
    assigned_to_emails = Column(JSON, nullable=False, default=list)
    created_at = Column(UTCDateTime, default=utcnow, index=True)

    def is_assigned_to(self, email: str) -> bool:
        email = email.strip().lower()
        return any(assigned.strip().lower() == email for assigned in self.assigned_to_emails or [])
