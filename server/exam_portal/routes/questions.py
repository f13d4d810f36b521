from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional

from exam_portal.database import get_db
from exam_portal.schemas import (
    BulkQuestionsRequest,
    MessageResponse,
    QuestionCreate,
    QuestionResponse,
    QuestionUpdate,
)
from exam_portal.services import question_store

router = APIRouter(tags=["Questions"])


@router.get("/getquestions", response_model=List[QuestionResponse])
async def get_questions(email: Optional[str] = None, db: Session = Depends(get_db)):
    """
    Questions assigned to a student email, or every question when no email is given
    """
    questions = question_store.find_assigned_questions(db, email)
    return [QuestionResponse.model_validate(q) for q in questions]


@router.get("/getquestions/{question_id}", response_model=QuestionResponse)
async def get_question(question_id: str, db: Session = Depends(get_db)):
    return QuestionResponse.model_validate(question_store.get_question(db, question_id))


@router.post("/questions", response_model=QuestionResponse, status_code=201)
async def create_question(request: QuestionCreate, db: Session = Depends(get_db)):
    question = question_store.create_question(db, request)
    return QuestionResponse.model_validate(question)


@router.post("/bulk-create", response_model=MessageResponse, status_code=201)
async def create_multiple_questions(request: BulkQuestionsRequest, db: Session = Depends(get_db)):
    questions = question_store.bulk_create_questions(db, request.questions)
    return {"message": f"{len(questions)} questions created successfully"}


@router.put("/getupdate/{question_id}", response_model=QuestionResponse)
async def update_question(question_id: str, request: QuestionUpdate, db: Session = Depends(get_db)):
    """
    Update a question. The merged record must still satisfy the option rules
    """
    question = question_store.update_question(db, question_id, request)
    return QuestionResponse.model_validate(question)


@router.delete("/delete/{question_id}", response_model=MessageResponse)
async def delete_question(question_id: str, db: Session = Depends(get_db)):
    question_store.delete_question(db, question_id)
    return {"message": "Deleted successfully"}
