"""
Negative-marking score computation.

A submission is scored against the question records it references:
every exact match is a correct answer, everything else (unanswered,
wrong, or pointing at a question that no longer exists) is wrong, and
one point is taken off for every full group of wrong answers.
"""
from typing import Iterable, Optional, Tuple

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from exam_portal.config import settings


AnswerPair = Tuple[str, Optional[str]]


class ScoreBreakdown(BaseModel):
    correct_count: int
    wrong_count: int
    total_questions: int
    negative_marks: int
    score: int  # may be negative
    display_score: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True


def is_correct(student_answer: str, correct_answer: Optional[str]) -> bool:
    """Exact, case-sensitive match. A missing question is never correct."""
    if correct_answer is None:
        return False
    return student_answer == correct_answer


def score_answers(
    pairs: Iterable[AnswerPair],
    negative_mark_every: Optional[int] = None,
) -> ScoreBreakdown:
    """
    Score (student_answer, correct_answer) pairs.

    Args:
        pairs: One pair per answer entry; correct_answer is None when the
            referenced question is missing.
        negative_mark_every: Wrong answers per deducted point
            (defaults to settings.negative_mark_every).

    Returns:
        ScoreBreakdown with the raw score and the display score floored at 0.
    """
    every = negative_mark_every or settings.negative_mark_every

    correct = 0
    total = 0
    for student_answer, correct_answer in pairs:
        total += 1
        if is_correct(student_answer, correct_answer):
            correct += 1

    wrong = total - correct
    negative = wrong // every
    score = correct - negative

    return ScoreBreakdown(
        correct_count=correct,
        wrong_count=wrong,
        total_questions=total,
        negative_marks=negative,
        score=score,
        display_score=max(0, score),
    )
