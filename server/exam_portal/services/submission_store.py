"""
Submission persistence and the read-time join against questions.

Answers keep the question id as a plain string. Nothing stops a question
from being deleted after students answered it, so every join here is a
lookup with a default: a missing question becomes `question = None`.
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from exam_portal.errors import NotFoundError
from exam_portal.models import Submission
from exam_portal.schemas import (
    SubmissionCreate,
    EnrichedAnswer,
    EnrichedSubmission,
    JoinedQuestion,
    SnapshotEntry,
    utcnow,
)
from exam_portal.services.question_store import get_questions_by_ids

logger = logging.getLogger(__name__)


def create_submission(db: Session, data: SubmissionCreate) -> str:
    payload = data.model_dump(mode="json")
    submission = Submission(
        student_email=data.student_email,
        answers=payload["answers"],
        snapshots=payload["snapshots"],
        submitted_at=data.submitted_at or utcnow(),
    )
    db.add(submission)
    db.commit()
    logger.info(
        "Stored submission %s for %s (%d answers, %d snapshots)",
        submission.id, submission.student_email, len(submission.answers), len(submission.snapshots),
    )
    return submission.id


def list_submissions(db: Session) -> List[Submission]:
    return db.query(Submission).order_by(Submission.submitted_at, Submission.id).all()


def get_submission_by_student(db: Session, student_email: str) -> Submission:
    """Most recent submission of a student."""
    submission = (
        db.query(Submission)
        .filter(Submission.student_email == student_email)
        .order_by(Submission.submitted_at.desc())
        .first()
    )
    if submission is None:
        raise NotFoundError("Submission not found for this student")
    return submission


def delete_submission(db: Session, submission_id: str) -> None:
    submission = db.get(Submission, submission_id)
    if submission is None:
        raise NotFoundError("Submission not found")
    db.delete(submission)
    db.commit()
    logger.info("Deleted submission %s", submission_id)


def enrich_submissions(db: Session, submissions: List[Submission]) -> List[EnrichedSubmission]:
    """Attach question text and correct answer to every answer entry."""
    question_ids = [a["question_id"] for sub in submissions for a in sub.answers]
    question_map = get_questions_by_ids(db, question_ids)

    enriched = []
    for sub in submissions:
        answers = []
        for entry in sub.answers:
            q = question_map.get(entry["question_id"])
            answers.append(EnrichedAnswer(
                question_id=entry["question_id"],
                answer=entry.get("answer", ""),
                question=JoinedQuestion(
                    id=q.id,
                    question_text=q.question_text,
                    correct_answer=q.correct_answer,
                ) if q else None,
            ))
        enriched.append(EnrichedSubmission(
            id=sub.id,
            student_email=sub.student_email,
            answers=answers,
            snapshots=[SnapshotEntry(**snap) for snap in sub.snapshots],
            submitted_at=sub.submitted_at,
        ))
    return enriched
