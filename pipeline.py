from __future__ import annotations

import logging
import math
from typing import Optional

from errors import GatewayError, InvalidRequest, StageFailed
from evaluation import evaluate_answers
from extraction import extract_questions
from gateway import ModelGateway
from reconcile import build_report
from schemas.correction import AnalysisRequest, CorrectionResult

logger = logging.getLogger(__name__)

MAX_SCORE_LIMIT = 10_000


def _required(value: Optional[str], message: str) -> str:
    if value is None or not isinstance(value, str) or not value.strip():
        raise InvalidRequest(message)
    return value.strip()


def validate_request(req: AnalysisRequest) -> None:
    """Checks done before any network call."""
    _required(req.image, "Immagine mancante")
    _required(req.subject, "Materia mancante")
    _required(req.test_type, "Tipo di verifica mancante")
    # isfinite() raises OverflowError on huge ints, so compare bounds first
    if req.max_score > MAX_SCORE_LIMIT or req.max_score <= 0 or not math.isfinite(req.max_score):
        raise InvalidRequest("Punteggio massimo non valido")


def correct_test(
    gateway: ModelGateway,
    req: AnalysisRequest,
    generated_at: Optional[float] = None,
) -> CorrectionResult:
    """
    Run one test through transcription, grading and reconciliation.

    Gateway failures end the request (tagged with the stage); an unparseable
    grading reply does not, it degrades to default scores.
    """
    validate_request(req)
    image, subject, test_type = req.image.strip(), req.subject.strip(), req.test_type.strip()
    logger.info(
        "received: subject=%s type=%s max_score=%s image_chars=%d",
        subject,
        test_type,
        req.max_score,
        len(image),
    )

    logger.info("extracting")
    try:
        extraction = extract_questions(gateway, image, subject)
    except GatewayError as exc:
        logger.error("image analysis failed: %s", exc)
        raise StageFailed("image analysis", exc) from exc

    logger.info("evaluating %d question(s)", len(extraction.questions))
    try:
        evaluation = evaluate_answers(
            gateway,
            extraction.questions,
            subject,
            test_type,
            req.max_score,
            req.custom_instructions,
        )
    except GatewayError as exc:
        logger.error("evaluation failed: %s", exc)
        raise StageFailed("evaluation", exc) from exc
    logger.info("evaluation %s", "degraded to defaults" if evaluation.degraded else "done")

    report = build_report(extraction, evaluation, subject, req.max_score, generated_at)
    logger.info(
        "reconciled: total=%s/%s (%s%%) grade=%s",
        report.total_score,
        report.max_score,
        report.percentage,
        report.grade,
    )
    return report
