"""Image -> transcribed questions and answers (vision model)."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from errors import NoQuestionsFound
from gateway import ModelGateway
from json_extract import extract_json
from prompts import extraction_prompt
from schemas.correction import ExtractedQuestion, RawExtraction

logger = logging.getLogger(__name__)

FALLBACK_QUESTION_TEXT = "Testo estratto dalla verifica"
NO_TEXT_ANSWER = "Nessun testo riconosciuto"


def _fallback(raw: str) -> Dict[str, Any]:
    # Unparseable transcription: grade the whole reply as one answer.
    return {
        "studentName": "",
        "questions": [
            {"number": 1, "text": FALLBACK_QUESTION_TEXT, "studentAnswer": raw or NO_TEXT_ANSWER}
        ],
    }


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value)


def _as_number(value: Any, position: int) -> int:
    if isinstance(value, bool):
        return position
    try:
        n = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return position
    return n if n >= 1 else position


def parse_extraction(raw: str) -> RawExtraction:
    data = extract_json(raw, _fallback(raw))

    items = data.get("questions")
    if not isinstance(items, list):
        items = []

    questions: List[ExtractedQuestion] = []
    for idx, item in enumerate(items, 1):
        if not isinstance(item, dict):
            continue
        questions.append(
            ExtractedQuestion(
                number=_as_number(item.get("number"), idx),
                text=_as_text(item.get("text")),
                student_answer=_as_text(item.get("studentAnswer")),
            )
        )

    return RawExtraction(student_name=_as_text(data.get("studentName")), questions=questions)


def extract_questions(gateway: ModelGateway, image: str, subject: str) -> RawExtraction:
    raw = gateway.send_vision(image, extraction_prompt(subject))
    logger.info("vision reply received (first 200 chars): %r", raw[:200])

    extraction = parse_extraction(raw)
    if not extraction.questions:
        raise NoQuestionsFound()

    logger.info("extracted %d question(s)", len(extraction.questions))
    return extraction
