from __future__ import annotations

from typing import Optional

_EXCERPT_LIMIT = 500


def truncate(text: str, limit: int = _EXCERPT_LIMIT) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


class CorrectionError(Exception):
    """
    Base for every error that ends a request with a JSON error body.
    `message` is user-facing; `details` is an optional diagnostic excerpt.
    """

    status_code = 500
    message = "Errore durante l'analisi."

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        if message is not None:
            self.message = message
        self.details = details
        super().__init__(self.message if details is None else f"{self.message} ({details})")


class InvalidRequest(CorrectionError):
    status_code = 400
    message = "Richiesta non valida."


class NoQuestionsFound(CorrectionError):
    status_code = 400
    message = "Non sono riuscito a identificare domande nella verifica."


# --- Gateway failures ---------------------------------------------------------------


class GatewayError(CorrectionError):
    pass


class ConfigurationError(GatewayError):
    message = "Credenziali del servizio AI non configurate."


class TransportError(GatewayError):
    message = "Impossibile contattare il servizio AI."


class UpstreamError(GatewayError):
    def __init__(self, status_code: int, body: str = ""):
        self.upstream_status = status_code
        self.body = truncate(body or "")
        if self.is_auth_failure:
            text = f"authentication failed (HTTP {status_code})"
        elif status_code == 404:
            text = "endpoint not found (HTTP 404)"
        else:
            text = f"upstream error (HTTP {status_code})"
        if self.body:
            text = f"{text}: {self.body}"
        super().__init__("Il servizio AI ha risposto con un errore.", details=text)

    @property
    def is_auth_failure(self) -> bool:
        return self.upstream_status in (401, 403)


# --- Pipeline ------------------------------------------------------------------------

STAGE_MESSAGES = {
    "image analysis": "Errore nell'analisi dell'immagine.",
    "evaluation": "Errore nella valutazione.",
}


class StageFailed(CorrectionError):
    """A gateway failure tagged with the pipeline stage it interrupted."""

    def __init__(self, stage: str, cause: GatewayError):
        self.stage = stage
        self.cause = cause
        details = cause.details or cause.message
        super().__init__(STAGE_MESSAGES.get(stage, CorrectionError.message), details=details)
