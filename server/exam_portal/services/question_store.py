"""
Question persistence.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from exam_portal.errors import NotFoundError, ValidationError
from exam_portal.models import Question
from exam_portal.schemas import QuestionCreate, QuestionUpdate

logger = logging.getLogger(__name__)


def find_assigned_questions(db: Session, email: Optional[str] = None) -> List[Question]:
    """
    Questions assigned to `email`, in creation order.
    All questions when no email is given.
    """
    questions = db.query(Question).order_by(Question.created_at, Question.id).all()
    if not email:
        return questions
    # assigned_to_emails is a JSON list, filtered here to stay portable across backends
    return [q for q in questions if q.is_assigned_to(email)]


def get_question(db: Session, question_id: str) -> Question:
    question = db.get(Question, question_id)
    if question is None:
        raise NotFoundError("Question not found")
    return question


def get_questions_by_ids(db: Session, question_ids) -> dict:
    """Map of id -> Question for the ids that still exist."""
    ids = list(set(question_ids))
    if not ids:
        return {}
    found = db.query(Question).filter(Question.id.in_(ids)).all()
    return {q.id: q for q in found}


def _to_model(data: QuestionCreate) -> Question:
    return Question(**data.model_dump())


def create_question(db: Session, data: QuestionCreate) -> Question:
    question = _to_model(data)
    db.add(question)
    db.commit()
    db.refresh(question)
    logger.info("Created question %s (%s)", question.id, question.type.value)
    return question


def bulk_create_questions(db: Session, items: List[QuestionCreate]) -> List[Question]:
    questions = [_to_model(item) for item in items]
    db.add_all(questions)
    db.commit()
    logger.info("Created %d questions", len(questions))
    return questions


def update_question(db: Session, question_id: str, changes: QuestionUpdate) -> Question:
    question = get_question(db, question_id)

    merged = QuestionCreate.model_validate(question).model_dump()
    merged.update(changes.model_dump(exclude_unset=True))
    try:
        validated = QuestionCreate(**merged)
    except ValueError as e:
        raise ValidationError(str(e))

    for field, value in validated.model_dump().items():
        setattr(question, field, value)
    db.commit()
    db.refresh(question)
    logger.info("Updated question %s", question.id)
    return question


def delete_question(db: Session, question_id: str) -> None:
    question = get_question(db, question_id)
    db.delete(question)
    db.commit()
    logger.info("Deleted question %s", question_id)
