"""Tests for the chat-completion relay.

Tests cover:
- Prompt selection and message shape sent upstream
- Markdown fence stripping of replies
- Pass-through of 429/402 and collapsing of other upstream failures
- Missing configuration and empty replies
- The direct Gemini provider
"""

import httpx
import pytest
from langchain_core.messages import AIMessage
from unittest.mock import MagicMock

from migrator import relay
from migrator.core.prompt import ES6_SYSTEM_PROMPT, TYPESCRIPT_SYSTEM_PROMPT
from migrator.relay import RelayError, build_messages, run_migration, to_chat_payload
from tests.conftest import RecordingTransport, completion


LEGACY = "var add = function(a, b) { return a + b; };"


# ── Tests: Message building ──────────────────────────────────────────────


class TestBuildMessages:

    def test_typescript_prompt(self):
        payload = to_chat_payload(build_messages(LEGACY, "typescript"))

        assert payload[0] == {"role": "system", "content": TYPESCRIPT_SYSTEM_PROMPT}
        assert payload[1]["role"] == "user"

    def test_unknown_target_uses_es6_prompt(self):
        payload = to_chat_payload(build_messages(LEGACY, "coffeescript"))

        assert payload[0]["content"] == ES6_SYSTEM_PROMPT

    def test_user_message_keeps_braces(self):
        """Braces in the source must not be treated as template variables."""
        payload = to_chat_payload(build_messages(LEGACY, "es6"))

        assert payload[1]["content"] == f"Convert the following JavaScript code:\n\n{LEGACY}"


# ── Tests: Gateway provider ──────────────────────────────────────────────


class TestGateway:

    def test_success_strips_fences(self, settings):
        transport = RecordingTransport(
            body=completion("```javascript\nconst add = (a, b) => a + b;\n```")
        )

        result = run_migration(LEGACY, "es6", settings=settings, transport=transport)

        assert result == "const add = (a, b) => a + b;"

    def test_request_shape(self, settings):
        transport = RecordingTransport(body=completion("const x = 1;"))

        run_migration(LEGACY, "typescript", settings=settings, transport=transport)

        request = transport.requests[-1]
        assert str(request.url) == "https://gateway.test/v1/chat/completions"
        assert request.headers["authorization"] == "Bearer test-key"
        body = transport.last_json
        assert body["model"] == "test/model"
        assert body["temperature"] == 0.3
        assert [m["role"] for m in body["messages"]] == ["system", "user"]
        assert body["messages"][0]["content"] == TYPESCRIPT_SYSTEM_PROMPT

    def test_plain_reply_is_trimmed(self, settings):
        transport = RecordingTransport(body=completion("\n  let y = 2;  \n"))

        assert run_migration(LEGACY, "es6", settings=settings, transport=transport) == "let y = 2;"

    @pytest.mark.parametrize(
        "status, expected_status, message",
        [
            (429, 429, relay.RATE_LIMIT_MESSAGE),
            (402, 402, relay.CREDITS_MESSAGE),
            (500, 500, relay.UPSTREAM_ERROR_MESSAGE),
            (401, 500, relay.UPSTREAM_ERROR_MESSAGE),
        ],
    )
    def test_upstream_status_mapping(self, settings, status, expected_status, message):
        transport = RecordingTransport(status_code=status, text="upstream said no")

        with pytest.raises(RelayError) as excinfo:
            run_migration(LEGACY, "es6", settings=settings, transport=transport)

        assert excinfo.value.status_code == expected_status
        assert excinfo.value.message == message

    @pytest.mark.parametrize(
        "body",
        [
            {"choices": []},
            {"choices": [{"message": "oops"}]},
            {"choices": {"0": {"message": {"content": "x"}}}},
            {"choices": ["plain"]},
            {"choices": [{"message": {"content": ["a", "b"]}}]},
            {"choices": [{"message": {"content": ""}}]},
            [],
        ],
    )
    def test_missing_content(self, settings, body):
        transport = RecordingTransport(body=body)

        with pytest.raises(RelayError) as excinfo:
            run_migration(LEGACY, "es6", settings=settings, transport=transport)

        assert excinfo.value.status_code == 500
        assert excinfo.value.message == relay.EMPTY_REPLY_MESSAGE

    def test_connection_error(self, settings):
        def handler(request):
            raise httpx.ConnectError("boom", request=request)

        with pytest.raises(RelayError) as excinfo:
            run_migration(LEGACY, "es6", settings=settings, transport=httpx.MockTransport(handler))

        assert excinfo.value.status_code == 500
        assert excinfo.value.message == relay.UPSTREAM_ERROR_MESSAGE

    def test_not_configured(self, settings):
        settings.ai_gateway_api_key = None
        transport = RecordingTransport(body=completion("x"))

        with pytest.raises(RelayError) as excinfo:
            run_migration(LEGACY, "es6", settings=settings, transport=transport)

        assert excinfo.value.status_code == 500
        assert excinfo.value.message == relay.NOT_CONFIGURED_MESSAGE
        assert transport.requests == []


# ── Tests: Gemini provider ───────────────────────────────────────────────


class TestGemini:

    @pytest.fixture
    def gemini_settings(self, settings):
        settings.ai_provider = "gemini"
        settings.google_api_key = "google-key"
        return settings

    def test_success(self, gemini_settings, monkeypatch):
        llm = MagicMock()
        llm.invoke.return_value = AIMessage(content="```ts\nconst n: number = 1;\n```")
        monkeypatch.setattr(relay, "build_gemini_llm", lambda s: llm)

        result = run_migration(LEGACY, "typescript", settings=gemini_settings)

        assert result == "const n: number = 1;"
        sent = llm.invoke.call_args[0][0]
        assert sent[0].content == TYPESCRIPT_SYSTEM_PROMPT

    def test_rate_limit_passthrough(self, gemini_settings, monkeypatch):
        class QuotaError(Exception):
            code = 429

        llm = MagicMock()
        llm.invoke.side_effect = QuotaError("quota")
        monkeypatch.setattr(relay, "build_gemini_llm", lambda s: llm)

        with pytest.raises(RelayError) as excinfo:
            run_migration(LEGACY, "es6", settings=gemini_settings)

        assert excinfo.value.status_code == 429

    def test_other_failure_is_500(self, gemini_settings, monkeypatch):
        llm = MagicMock()
        llm.invoke.side_effect = RuntimeError("nope")
        monkeypatch.setattr(relay, "build_gemini_llm", lambda s: llm)

        with pytest.raises(RelayError) as excinfo:
            run_migration(LEGACY, "es6", settings=gemini_settings)

        assert excinfo.value.status_code == 500
        assert excinfo.value.message == relay.UPSTREAM_ERROR_MESSAGE

    def test_requires_google_key(self, gemini_settings):
        gemini_settings.google_api_key = None

        with pytest.raises(RelayError) as excinfo:
            run_migration(LEGACY, "es6", settings=gemini_settings)

        assert excinfo.value.message == relay.NOT_CONFIGURED_MESSAGE
