from sqlalchemy import Column, String, JSON
from exam_portal.database import Base, UTCDateTime
from exam_portal.models.content import new_id


class Submission(Base):
    """One completed exam attempt, stored as sent by the student client"""
    __tablename__ = "submissions"

    id = Column(String(32), primary_key=True, default=new_id)
    student_email = Column(String, nullable=False, index=True)
    answers = Column(JSON, nullable=False)  # [{"question_id": "...", "answer": "..."}]
    snapshots = Column(JSON, nullable=False, default=list)  # [{"image": "data:...", "timestamp": "..."}]
    submitted_at = Column(UTCDateTime, nullable=False)
