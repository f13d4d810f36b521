"""
Per-student aggregation of scored submissions for the monitoring panel.
"""
from typing import Dict, List

from exam_portal.schemas import EnrichedSubmission, ScoredSubmission, StudentSubmissions
from exam_portal.services.scoring import ScoreBreakdown, score_answers


def score_submission(submission: EnrichedSubmission) -> ScoreBreakdown:
    return score_answers(
        (a.answer, a.question.correct_answer if a.question else None)
        for a in submission.answers
    )


def group_by_student(submissions: List[EnrichedSubmission]) -> List[StudentSubmissions]:
    """Group by student email, keeping the order in which students first appear."""
    groups: Dict[str, List[ScoredSubmission]] = {}
    for sub in submissions:
        scored = ScoredSubmission(**sub.model_dump(), stats=score_submission(sub))
        groups.setdefault(sub.student_email, []).append(scored)

    return [
        StudentSubmissions(
            student_email=email,
            submission_count=len(subs),
            submissions=subs,
        )
        for email, subs in groups.items()
    ]
