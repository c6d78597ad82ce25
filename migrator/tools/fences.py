from __future__ import annotations

import re


_OPENING_FENCE = re.compile(r"^```(?:typescript|javascript|ts|js)?\n?")
_CLOSING_FENCE = re.compile(r"\n?```$")


def strip_code_fences(text: str) -> str:
    """Remove a markdown code fence the model may have wrapped its answer in.

    Only a reply that starts with a fence is touched; the opening fence may
    carry a ``typescript``/``javascript``/``ts``/``js`` tag. Other text is
    returned trimmed.
    """
    cleaned = (text or "").strip()
    if cleaned.startswith("```"):
        cleaned = _OPENING_FENCE.sub("", cleaned, count=1)
        cleaned = _CLOSING_FENCE.sub("", cleaned, count=1)
    return cleaned
