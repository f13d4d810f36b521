from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from exam_portal.database import get_db
from exam_portal.schemas import (
    EnrichedSubmission,
    MessageResponse,
    StudentSubmissions,
    SubmissionCreate,
    SubmissionRecord,
    SubmitResponse,
)
from exam_portal.services import submission_store
from exam_portal.services.monitoring import group_by_student

router = APIRouter(tags=["Submission"])


@router.post("/submit", response_model=SubmitResponse)
async def submit_exam(request: SubmissionCreate, db: Session = Depends(get_db)):
    """
    Student submits one completed exam attempt
    """
    submission_id = submission_store.create_submission(db, request)
    return SubmitResponse(message="Submission successful", id=submission_id)


@router.get("/submission/{student_email}", response_model=SubmissionRecord)
async def get_submission_by_student(student_email: str, db: Session = Depends(get_db)):
    submission = submission_store.get_submission_by_student(db, student_email)
    return SubmissionRecord.model_validate(submission)


@router.get("/getAll", response_model=List[EnrichedSubmission])
async def get_all_submissions(db: Session = Depends(get_db)):
    """
    Every submission, with the question text and correct answer joined into each answer.
    Answers whose question was deleted carry `question: null`.
    """
    submissions = submission_store.list_submissions(db)
    return submission_store.enrich_submissions(db, submissions)


@router.get("/monitoring", response_model=List[StudentSubmissions])
async def get_monitoring(db: Session = Depends(get_db)):
    """
    Submissions grouped by student with negative-marking scores
    """
    submissions = submission_store.list_submissions(db)
    return group_by_student(submission_store.enrich_submissions(db, submissions))


@router.delete("/delete/{submission_id}", response_model=MessageResponse)
async def delete_submission(submission_id: str, db: Session = Depends(get_db)):
    submission_store.delete_submission(db, submission_id)
    return {"message": "Submission deleted successfully"}
