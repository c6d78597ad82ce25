from __future__ import annotations

import logging
from typing import Dict, List, Optional

import httpx
from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate
from langchain_google_genai import ChatGoogleGenerativeAI

from config.settings import Settings, get_settings
from migrator.core.prompt import USER_PROMPT_PREFIX, system_prompt_for
from migrator.tools.fences import strip_code_fences


logger = logging.getLogger(__name__)


RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again in a moment."
CREDITS_MESSAGE = "AI credits exhausted. Please add more credits."
UPSTREAM_ERROR_MESSAGE = "AI service error"
EMPTY_REPLY_MESSAGE = "Failed to generate migrated code"
NOT_CONFIGURED_MESSAGE = "AI service not configured"

# Upstream statuses passed through to the caller; everything else is a 500.
_PASSTHROUGH_STATUS = {
    429: RATE_LIMIT_MESSAGE,
    402: CREDITS_MESSAGE,
}

_ROLE_MAP = {"system": "system", "human": "user", "ai": "assistant"}


class RelayError(Exception):
    """A relay failure with the HTTP status the endpoint should answer with."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


_prompt = ChatPromptTemplate.from_messages(
    [
        ("system", "{system_prompt}"),
        ("human", "{user_prompt}"),
    ]
)


def build_messages(code: str, target_format: str) -> List[BaseMessage]:
    # Code goes in as a variable so braces in it are never read as template slots.
    return _prompt.format_messages(
        system_prompt=system_prompt_for(target_format),
        user_prompt=f"{USER_PROMPT_PREFIX}{code}",
    )


def to_chat_payload(messages: List[BaseMessage]) -> List[Dict[str, str]]:
    payload: List[Dict[str, str]] = []
    for message in messages:
        role = _ROLE_MAP.get(message.type, "user")
        payload.append({"role": role, "content": str(message.content)})
    return payload


def _upstream_error(status_code: Optional[int]) -> RelayError:
    if status_code in _PASSTHROUGH_STATUS:
        return RelayError(status_code, _PASSTHROUGH_STATUS[status_code])
    return RelayError(500, UPSTREAM_ERROR_MESSAGE)


def _extract_content(data: Dict) -> Optional[str]:
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    message = choices[0].get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None


def call_gateway(
    messages: List[BaseMessage],
    settings: Settings,
    transport: Optional[httpx.BaseTransport] = None,
) -> str:
    body = {
        "model": settings.ai_model,
        "messages": to_chat_payload(messages),
        "temperature": settings.temperature,
    }
    headers = {
        "Authorization": f"Bearer {settings.ai_gateway_api_key}",
        "Content-Type": "application/json",
    }

    try:
        with httpx.Client(timeout=settings.upstream_timeout, transport=transport) as client:
            response = client.post(settings.ai_gateway_url, json=body, headers=headers)
    except httpx.HTTPError as exc:
        logger.error("AI gateway request failed: %s", exc)
        raise RelayError(500, UPSTREAM_ERROR_MESSAGE) from exc

    if response.is_error:
        logger.error("AI gateway error: %s %s", response.status_code, response.text[:500])
        raise _upstream_error(response.status_code)

    try:
        data = response.json()
    except ValueError as exc:
        logger.error("AI gateway returned a non-JSON body: %s", response.text[:500])
        raise RelayError(500, EMPTY_REPLY_MESSAGE) from exc

    content = _extract_content(data) if isinstance(data, dict) else None
    if not content:
        logger.error("No content in AI response: %s", data)
        raise RelayError(500, EMPTY_REPLY_MESSAGE)
    return content


def build_gemini_llm(settings: Settings) -> ChatGoogleGenerativeAI:
    return ChatGoogleGenerativeAI(
        model=settings.gemini_model,
        google_api_key=settings.google_api_key,
        temperature=settings.temperature,
        max_retries=1,
        timeout=settings.upstream_timeout,
    )


def call_gemini(messages: List[BaseMessage], settings: Settings) -> str:
    llm = build_gemini_llm(settings)
    try:
        result = llm.invoke(messages)
    except Exception as exc:
        status_code = getattr(exc, "code", None) or getattr(exc, "status_code", None)
        logger.error("Gemini call failed (status=%s): %s", status_code, exc)
        raise _upstream_error(status_code if isinstance(status_code, int) else None) from exc

    content = result.content
    if isinstance(content, list):
        # Multi-part replies come back as a list of text chunks or dicts.
        content = "".join(
            part.get("text", "") if isinstance(part, dict) else str(part) for part in content
        )
    if not content:
        logger.error("No content in Gemini response: %s", result)
        raise RelayError(500, EMPTY_REPLY_MESSAGE)
    return content


def run_migration(
    code: str,
    target_format: str,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> str:
    """Send ``code`` to the configured model and return the cleaned reply."""
    settings = settings or get_settings()
    if not settings.provider_key:
        logger.error("API key for provider %r is not configured", settings.ai_provider)
        raise RelayError(500, NOT_CONFIGURED_MESSAGE)

    messages = build_messages(code, target_format)
    logger.info(
        "Processing migration request: %s chars, target: %s, provider: %s",
        len(code),
        target_format,
        settings.ai_provider,
    )

    if settings.ai_provider == "gemini":
        reply = call_gemini(messages, settings)
    else:
        reply = call_gateway(messages, settings, transport=transport)

    clean_code = strip_code_fences(reply)
    logger.info("Migration successful: %s chars output", len(clean_code))
    return clean_code
