import itertools

from exam_portal.services.scoring import score_answers


def test_five_of_nine_correct_scores_four():
    pairs = [("A", "A")] * 5 + [("B", "A")] * 4
    stats = score_answers(pairs)
    assert stats.correct_count == 5
    assert stats.wrong_count == 4
    assert stats.total_questions == 9
    assert stats.negative_marks == 1
    assert stats.score == 4
    assert stats.display_score == 4


def test_unanswered_and_orphaned_count_as_wrong():
    stats = score_answers([("", "A"), ("A", None), ("", None)])
    assert stats.correct_count == 0
    assert stats.wrong_count == 3
    assert stats.negative_marks == 1


def test_empty_answer_never_matches_missing_question():
    assert score_answers([("", None)]).correct_count == 0


def test_raw_score_can_go_negative_but_display_is_floored():
    stats = score_answers([("x", "A")] * 6)
    assert stats.score == -2
    assert stats.display_score == 0


def test_match_is_case_sensitive_and_untrimmed():
    stats = score_answers([("paris", "Paris"), ("Paris ", "Paris"), ("Paris", "Paris")])
    assert stats.correct_count == 1


def test_order_does_not_change_score():
    pairs = [("A", "A"), ("B", "A"), ("C", None), ("D", "D"), ("", "E")]
    expected = score_answers(pairs)
    for perm in itertools.permutations(pairs):
        assert score_answers(perm) == expected


def test_custom_negative_mark_ratio():
    stats = score_answers([("x", "A")] * 4 + [("A", "A")] * 3, negative_mark_every=2)
    assert stats.negative_marks == 2
    assert stats.score == 1


def test_no_answers():
    stats = score_answers([])
    assert stats.total_questions == 0
    assert stats.score == 0


def test_serializes_camel_case():
    body = score_answers([("A", "A")]).model_dump(by_alias=True)
    assert body == {
        "correctCount": 1,
        "wrongCount": 0,
        "totalQuestions": 1,
        "negativeMarks": 0,
        "score": 1,
        "displayScore": 1,
    }
