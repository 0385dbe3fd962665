"""Utility to extract JSON from LLM responses."""

from __future__ import annotations

import json
import re

_FENCE_RE = re.compile(r"```(?:json)?\s*\n(.*?)\n\s*```", re.DOTALL)


def extract_json(text: str) -> dict | list:
    """Extract JSON from an LLM reply.

    Tries in order:
    1. Direct json.loads on the full text
    2. The body of the first fenced code block
    3. First '{' to last '}'
    4. First '[' to last ']'
    """
    text = (text or "").strip()

    candidates = [text]
    fence = _FENCE_RE.search(text)
    if fence:
        candidates.append(fence.group(1).strip())
    candidates.append(_span(text, "{", "}"))
    candidates.append(_span(text, "[", "]"))

    for candidate in candidates:
        if not candidate:
            continue
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue

    raise ValueError(f"Could not extract JSON from text: {text[:200]}...")


def _span(text: str, opener: str, closer: str) -> str:
    start = text.find(opener)
    end = text.rfind(closer)
    if start == -1 or end <= start:
        return ""
    return text[start : end + 1]
