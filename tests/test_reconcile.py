from reconcile import build_report, round1
from schemas.correction import ExtractedQuestion, RawEvaluation, RawEvaluationEntry, RawExtraction

STAMP = 1_700_000_000.0


def _extraction(*numbers, name="Marco"):
    return RawExtraction(
        student_name=name,
        questions=[ExtractedQuestion(number=n, text=f"D{n}", student_answer=f"R{n}") for n in numbers],
    )


def _evaluation(*entries, overall="Bene"):
    return RawEvaluation(questions=list(entries), overall_feedback=overall)


def test_matches_by_number_not_position():
    ev = _evaluation(
        RawEvaluationEntry(number=2, score=4, feedback="due"),
        RawEvaluationEntry(number=1, score=3, feedback="uno"),
    )
    report = build_report(_extraction(1, 2), ev, "matematica", 10, STAMP)
    assert [q.feedback for q in report.questions] == ["uno", "due"]
    assert report.total_score == 7.0
    assert report.percentage == 70.0
    assert report.grade == "7 discreto"
    assert report.subject == "Matematica"
    assert report.student_name == "Marco"


def test_positional_fallback_when_numbers_disagree():
    ev = _evaluation(RawEvaluationEntry(number=10, score=1), RawEvaluationEntry(number=11, score=2))
    report = build_report(_extraction(1, 2), ev, "storia", 10, STAMP)
    assert [q.score for q in report.questions] == [1.0, 2.0]


def test_missing_entries_get_half_credit():
    report = build_report(_extraction(1, 2, 3, 4), _evaluation(overall=""), "storia", 8, STAMP)
    assert len(report.questions) == 4
    assert all(q.score == 1.0 and q.max_score == 2.0 for q in report.questions)
    # 1.0 < 0.6 * 2.0
    assert all(q.is_correct is False for q in report.questions)
    assert all(q.feedback == "Nessun feedback" for q in report.questions)
    assert report.overall_feedback == "Valutazione completata."


def test_scores_are_clamped():
    ev = _evaluation(
        RawEvaluationEntry(number=1, score=-3),
        RawEvaluationEntry(number=2, score=99),
    )
    report = build_report(_extraction(1, 2), ev, "scienze", 10, STAMP)
    assert [q.score for q in report.questions] == [0.0, 5.0]
    assert [q.is_correct for q in report.questions] == [False, True]


def test_explicit_zero_score_is_kept():
    ev = _evaluation(RawEvaluationEntry(number=1, score=0, is_correct=False))
    report = build_report(_extraction(1), ev, "inglese", 10, STAMP)
    assert report.questions[0].score == 0.0


def test_explicit_is_correct_wins_over_threshold():
    ev = _evaluation(RawEvaluationEntry(number=1, score=1, is_correct=True))
    report = build_report(_extraction(1), ev, "inglese", 10, STAMP)
    assert report.questions[0].is_correct is True


def test_invariants_hold_for_any_evaluation_length():
    for n in range(1, 6):
        for m in range(0, 8):
            entries = [RawEvaluationEntry(number=i + 1, score=(i - 2) * 3) for i in range(m)]
            report = build_report(_extraction(*range(1, n + 1)), _evaluation(*entries), "italiano", 10, STAMP)
            cap = 10 / n
            assert len(report.questions) == n
            assert all(0 <= q.score <= cap for q in report.questions)
            assert all(q.confirmed is None for q in report.questions)


def test_ids_unique_even_with_duplicate_numbers():
    report = build_report(_extraction(1, 1, 2), _evaluation(), "italiano", 9, STAMP)
    ids = [q.id for q in report.questions]
    assert len(set(ids)) == 3
    assert ids[0] == "q-1-1700000000000"


def test_deterministic_apart_from_ids():
    ext = _extraction(1, 2, 3)
    ev = _evaluation(RawEvaluationEntry(number=1, score=2.5), RawEvaluationEntry(number=3, score=1))
    a = build_report(ext, ev, "storia", 10, STAMP).model_dump()
    b = build_report(ext, ev, "storia", 10, STAMP + 5).model_dump()
    for q in a["questions"] + b["questions"]:
        q.pop("id")
    assert a == b


def test_rounding_is_half_up():
    assert round1(7.25) == 7.3
    assert round1(66.66666) == 66.7
    assert round1(0.04) == 0.0


def test_round1_passes_through_values_it_cannot_scale():
    assert round1(1e308) == 1e308
    assert round1(float("inf")) == float("inf")
