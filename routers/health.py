# routers/health.py
from datetime import datetime, timezone

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
def health():
    return {"status": "ok", "timestamp": _now()}


@router.get("/debug")
def debug(request: Request):
    # Reports configuration state only; never the key itself.
    gateway = request.app.state.gateway
    settings = gateway.settings
    if not settings.has_api_key:
        status = "missing_api_key"
    elif gateway.initialized:
        status = "initialized"
    else:
        status = "not_initialized"
    return {
        "hasApiKey": settings.has_api_key,
        "apiBaseUrl": settings.base_url,
        "visionModel": settings.vision_model,
        "textModel": settings.text_model,
        "gatewayStatus": status,
        "timestamp": _now(),
    }
