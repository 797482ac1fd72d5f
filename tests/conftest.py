"""
Shared fixtures for the correction API tests.
No network: the model gateway is replaced by a scripted fake.
"""
import pytest

from deps.gateway import get_gateway
from errors import UpstreamError
from main import app


class FakeGateway:
    """Replays canned model replies and records what was asked."""

    def __init__(self, vision_reply="", text_reply="", vision_error=None, text_error=None):
        self.vision_reply = vision_reply
        self.text_reply = text_reply
        self.vision_error = vision_error
        self.text_error = text_error
        self.vision_calls = []
        self.text_calls = []

    def send_vision(self, image, prompt):
        self.vision_calls.append((image, prompt))
        if self.vision_error is not None:
            raise self.vision_error
        return self.vision_reply

    def send_text(self, messages, temperature=0.3):
        self.text_calls.append((list(messages), temperature))
        if self.text_error is not None:
            raise self.text_error
        return self.text_reply

    @property
    def calls(self):
        return len(self.vision_calls) + len(self.text_calls)


@pytest.fixture
def fake_gateway():
    gw = FakeGateway()
    app.dependency_overrides[get_gateway] = lambda: gw
    yield gw
    app.dependency_overrides.pop(get_gateway, None)


@pytest.fixture
def unauthorized():
    return UpstreamError(401, '{"error": "invalid api key"}')
