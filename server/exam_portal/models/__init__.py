"""
Models package initialization
Import all models here to ensure they are registered with SQLAlchemy
"""

from exam_portal.models.user import User, UserRole
from exam_portal.models.content import Question, QuestionType, Difficulty
from exam_portal.models.submission import Submission

__all__ = [
    "User",
    "UserRole",
    "Question",
    "QuestionType",
    "Difficulty",
    "Submission",
]
