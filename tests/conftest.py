import json

import httpx
import pytest

from config.settings import Settings


@pytest.fixture
def settings(monkeypatch):
    """Gateway settings with a fake key and no real endpoint."""
    monkeypatch.setenv("AI_PROVIDER", "gateway")
    monkeypatch.setenv("AI_GATEWAY_URL", "https://gateway.test/v1/chat/completions")
    monkeypatch.setenv("AI_GATEWAY_API_KEY", "test-key")
    monkeypatch.setenv("AI_MODEL", "test/model")
    monkeypatch.setenv("MODEL_TEMPERATURE", "0.3")
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    return Settings()


def completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it sees."""

    def __init__(self, status_code=200, body=None, text=None):
        self.requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            if text is not None:
                return httpx.Response(status_code, text=text)
            return httpx.Response(status_code, json=body if body is not None else {})

        super().__init__(handler)

    @property
    def last_json(self):
        return json.loads(self.requests[-1].content)
