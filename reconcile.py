from __future__ import annotations

import math
import time
from typing import List, Optional, Sequence

from evaluation import DEFAULT_OVERALL_FEEDBACK
from grade_scale import calculate_grade
from schemas.correction import (
    CorrectionResult,
    ExtractedQuestion,
    Question,
    RawEvaluation,
    RawEvaluationEntry,
    RawExtraction,
)

CORRECT_THRESHOLD = 0.6
DEFAULT_FEEDBACK = "Nessun feedback"


def round1(x: float) -> float:
    # half-up, so 7.25 -> 7.3 (round() would give 7.2)
    scaled = x * 10 + 0.5
    if not math.isfinite(scaled):
        return x
    return math.floor(scaled) / 10


def display_subject(subject: str) -> str:
    return subject[:1].upper() + subject[1:]


def _match_entry(
    q: ExtractedQuestion, index: int, entries: Sequence[RawEvaluationEntry]
) -> Optional[RawEvaluationEntry]:
    """By question number first, then by position."""
    for e in entries:
        if e.number == q.number:
            return e
    if index < len(entries):
        return entries[index]
    return None


def _build_question(
    q: ExtractedQuestion,
    entry: Optional[RawEvaluationEntry],
    cap: float,
    qid: str,
) -> Question:
    if entry is None:
        entry = RawEvaluationEntry(number=q.number)

    raw_score = entry.score if entry.score is not None else cap / 2
    score = min(max(0.0, raw_score), cap)
    is_correct = entry.is_correct if entry.is_correct is not None else score >= CORRECT_THRESHOLD * cap

    return Question(
        id=qid,
        number=q.number,
        text=q.text,
        student_answer=q.student_answer,
        correct_answer=entry.correct_answer,
        score=score,
        max_score=cap,
        feedback=entry.feedback or DEFAULT_FEEDBACK,
        is_correct=is_correct,
        confirmed=None,
    )


def build_report(
    extraction: RawExtraction,
    evaluation: RawEvaluation,
    subject: str,
    max_score: float,
    generated_at: Optional[float] = None,
) -> CorrectionResult:
    """
    Merge transcription and grading into the final report.
    `generated_at` (epoch seconds) only feeds question ids; defaults to now.
    """
    cap = max_score / len(extraction.questions)
    stamp = int((generated_at if generated_at is not None else time.time()) * 1000)

    questions: List[Question] = []
    seen = set()
    for index, q in enumerate(extraction.questions):
        qid = f"q-{q.number}-{stamp}"
        if qid in seen:
            qid = f"{qid}-{index}"
        seen.add(qid)
        entry = _match_entry(q, index, evaluation.questions)
        questions.append(_build_question(q, entry, cap, qid))

    total = sum(q.score for q in questions)
    percentage = total / max_score * 100

    return CorrectionResult(
        student_name=extraction.student_name,
        subject=display_subject(subject),
        total_score=round1(total),
        max_score=max_score,
        percentage=round1(percentage),
        grade=calculate_grade(percentage),
        questions=questions,
        overall_feedback=evaluation.overall_feedback or DEFAULT_OVERALL_FEEDBACK,
    )
