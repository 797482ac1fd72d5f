from __future__ import annotations

import os
from typing import List, Optional

from pydantic import BaseModel, Field

DEFAULT_BASE_URL = "https://api.z.ai/api/paas/v4"
DEFAULT_VISION_PATHS = ["/chat/completions/vision", "/chat/completions"]
DEFAULT_TEXT_PATH = "/chat/completions"
DEFAULT_TIMEOUT = 120.0


def _read_float_env(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _read_list_env(key: str, default: List[str]) -> List[str]:
    raw = os.getenv(key, "")
    items = [p.strip() for p in raw.split(",") if p.strip()]
    return items or list(default)


class GatewaySettings(BaseModel):
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    vision_model: str = "glm-4.5v"
    text_model: str = "glm-4.5"
    # Tried in order for multimodal requests; deployments disagree on the path.
    vision_paths: List[str] = Field(default_factory=lambda: list(DEFAULT_VISION_PATHS))
    text_path: str = DEFAULT_TEXT_PATH
    timeout: float = DEFAULT_TIMEOUT

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key.strip())

    @classmethod
    def from_env(cls) -> "GatewaySettings":
        return cls(
            api_key=os.getenv("ZAI_API_KEY", ""),
            base_url=(os.getenv("ZAI_API_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
            vision_model=os.getenv("LLM_VISION_MODEL", "glm-4.5v"),
            text_model=os.getenv("LLM_TEXT_MODEL", "glm-4.5"),
            vision_paths=_read_list_env("LLM_VISION_PATHS", DEFAULT_VISION_PATHS),
            text_path=os.getenv("LLM_TEXT_PATH", DEFAULT_TEXT_PATH),
            timeout=_read_float_env("LLM_HTTP_TIMEOUT", DEFAULT_TIMEOUT),
        )


def cors_origins() -> List[str]:
    origin: Optional[str] = os.getenv("FRONTEND_URL")
    return [origin] if origin else ["*"]


def server_port() -> int:
    try:
        return int(os.getenv("PORT", "3001"))
    except ValueError:
        return 3001
