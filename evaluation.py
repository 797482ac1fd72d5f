"""Transcribed answers -> per-question scores (text model)."""

from __future__ import annotations

import logging
import math
from typing import Any, List, Optional, Sequence

from gateway import ChatMessage, ModelGateway
from json_extract import extract_json
from prompts import EVALUATION_SYSTEM_PROMPT, evaluation_prompt
from schemas.correction import ExtractedQuestion, RawEvaluation, RawEvaluationEntry

logger = logging.getLogger(__name__)

GRADING_TEMPERATURE = 0.3
FALLBACK_FEEDBACK = "Valutazione automatica"
DEFAULT_OVERALL_FEEDBACK = "Valutazione completata."


def fallback_evaluation(questions: Sequence[ExtractedQuestion], cap: float) -> RawEvaluation:
    """Half credit on every question when the grading reply is unusable."""
    return RawEvaluation(
        questions=[
            RawEvaluationEntry(
                number=q.number,
                score=cap / 2,
                correct_answer="",
                feedback=FALLBACK_FEEDBACK,
                is_correct=False,
            )
            for q in questions
        ],
        overall_feedback=DEFAULT_OVERALL_FEEDBACK,
        degraded=True,
    )


def _opt_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


def _opt_int(value: Any) -> Optional[int]:
    f = _opt_number(value)
    return int(f) if f is not None else None


def _opt_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def parse_evaluation(
    raw: str, questions: Sequence[ExtractedQuestion], cap: float
) -> RawEvaluation:
    data = extract_json(raw, None)
    items = data.get("questions") if isinstance(data, dict) else None
    if not isinstance(items, list):
        logger.warning("grading reply not usable, falling back to default scores")
        return fallback_evaluation(questions, cap)

    entries: List[RawEvaluationEntry] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        is_correct = item.get("isCorrect")
        entries.append(
            RawEvaluationEntry(
                number=_opt_int(item.get("number")),
                score=_opt_number(item.get("score")),
                correct_answer=_opt_text(item.get("correctAnswer")),
                feedback=_opt_text(item.get("feedback")),
                is_correct=is_correct if isinstance(is_correct, bool) else None,
            )
        )

    return RawEvaluation(questions=entries, overall_feedback=_opt_text(data.get("overallFeedback")))


def evaluate_answers(
    gateway: ModelGateway,
    questions: Sequence[ExtractedQuestion],
    subject: str,
    test_type: str,
    max_score: float,
    custom_instructions: Optional[str] = None,
) -> RawEvaluation:
    cap = max_score / len(questions)
    messages = [
        ChatMessage(role="system", content=EVALUATION_SYSTEM_PROMPT),
        ChatMessage(
            role="user",
            content=evaluation_prompt(questions, subject, test_type, cap, custom_instructions),
        ),
    ]
    raw = gateway.send_text(messages, temperature=GRADING_TEMPERATURE)
    return parse_evaluation(raw, questions, cap)
