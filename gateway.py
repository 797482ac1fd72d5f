"""Chat-completion client for the AI provider (text and vision)."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

import httpx

from config import GatewaySettings
from errors import ConfigurationError, TransportError, UpstreamError

logger = logging.getLogger(__name__)

# base64 magic prefixes -> media type, for images sent without a data URI header
_IMAGE_SIGNATURES = [
    ("/9j/", "image/jpeg"),
    ("iVBORw0KGgo", "image/png"),
    ("R0lGOD", "image/gif"),
    ("UklGR", "image/webp"),
    ("Qk", "image/bmp"),
]


@dataclass
class ChatMessage:
    role: str
    content: Union[str, List[Dict[str, Any]]]

    def as_payload(self) -> Dict[str, Any]:
        return {"role": self.role, "content": self.content}


def text_block(text: str) -> Dict[str, Any]:
    return {"type": "text", "text": text}


def image_block(url: str) -> Dict[str, Any]:
    return {"type": "image_url", "image_url": {"url": url}}


def to_data_uri(image: str) -> str:
    """Accept a data URI or bare base64 and always return a data URI."""
    image = image.strip()
    if image.startswith("data:") or image.startswith(("http://", "https://")):
        return image
    media_type = "image/jpeg"
    for prefix, candidate in _IMAGE_SIGNATURES:
        if image.startswith(prefix):
            media_type = candidate
            break
    return f"data:{media_type};base64,{image}"


def _content_from(data: Dict[str, Any]) -> str:
    choices = data.get("choices") or [{}]
    first = choices[0] if isinstance(choices, list) and choices else {}
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        # some deployments answer with typed blocks
        return "".join(
            b.get("text", "") for b in content if isinstance(b, dict) and b.get("type") == "text"
        )
    return ""


class ModelGateway:
    """
    Sends chat requests to the provider and returns the reply text.

    The httpx client is created on first use, once, and shared by every request
    thread. Pass `transport` to route traffic somewhere other than the network.
    """

    def __init__(
        self,
        settings: GatewaySettings,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.settings = settings
        self._transport = transport
        self._client: Optional[httpx.Client] = None
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._client is not None

    def _get_client(self) -> httpx.Client:
        if not self.settings.has_api_key:
            raise ConfigurationError(details="ZAI_API_KEY is not set")
        client = self._client
        if client is not None:
            return client
        with self._lock:
            if self._client is None:
                logger.info(
                    "initializing AI gateway (base_url=%s, timeout=%ss)",
                    self.settings.base_url,
                    self.settings.timeout,
                )
                self._client = httpx.Client(
                    base_url=self.settings.base_url,
                    timeout=self.settings.timeout,
                    transport=self._transport,
                    headers={
                        "Authorization": f"Bearer {self.settings.api_key}",
                        "Content-Type": "application/json",
                    },
                )
            return self._client

    def close(self) -> None:
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    # --- Public API -------------------------------------------------------------------

    def send_text(self, messages: Sequence[ChatMessage], temperature: float = 0.3) -> str:
        payload = {
            "model": self.settings.text_model,
            "messages": [m.as_payload() for m in messages],
            "temperature": temperature,
        }
        return self._post([self.settings.text_path], payload)

    def send_vision(self, image: str, prompt: str) -> str:
        message = ChatMessage(
            role="user",
            content=[text_block(prompt), image_block(to_data_uri(image))],
        )
        payload = {
            "model": self.settings.vision_model,
            "messages": [message.as_payload()],
        }
        return self._post(self.settings.vision_paths, payload)

    # --- Transport --------------------------------------------------------------------

    def _post(self, paths: Sequence[str], payload: Dict[str, Any]) -> str:
        if not paths:
            raise ConfigurationError(details="no provider endpoint configured")
        client = self._get_client()
        last_error: Optional[UpstreamError] = None

        for path in paths:
            logger.debug("POST %s model=%s", path, payload.get("model"))
            try:
                response = client.post(path, json=payload)
            except httpx.TransportError as exc:
                logger.error("transport error calling %s: %s", path, exc)
                raise TransportError(details=f"{type(exc).__name__}: {exc}") from exc

            if response.is_success:
                return self._read_content(response)

            error = UpstreamError(response.status_code, response.text)
            if error.is_auth_failure:
                # reachable endpoint, bad credentials: stop probing
                logger.error("provider rejected credentials at %s (%s)", path, response.status_code)
                raise error
            logger.warning("provider answered %s at %s, trying next endpoint", response.status_code, path)
            last_error = error

        raise last_error

    @staticmethod
    def _read_content(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            raise UpstreamError(response.status_code, response.text)
        if not isinstance(data, dict):
            raise UpstreamError(response.status_code, response.text)
        content = _content_from(data)
        logger.debug("provider reply chars=%d", len(content))
        return content
