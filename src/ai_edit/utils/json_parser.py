"""Utility to extract a JSON object from LLM responses."""

from __future__ import annotations

import json
import re

# ```lang ... ``` with an optional language tag; inner content is kept.
_FENCE_RE = re.compile(r"```[\w+-]*[ \t]*\n?(.*?)```", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Unwrap every fenced code block in place, keeping its content."""
    return _FENCE_RE.sub(lambda m: m.group(1).strip(), text).strip()


def slice_braces(text: str) -> str | None:
    """Return text from the first '{' to the last '}' inclusive, if any."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        return None
    return text[start : end + 1]


def extract_json(text: str) -> dict | list:
    """Extract the JSON object embedded in an LLM response.

    1. Unwrap ```json / ``` fenced blocks
    2. Take first '{' to last '}' and parse

    Truncated or malformed JSON is not repaired; it raises ValueError.
    """
    text = text or ""
    candidate = slice_braces(strip_code_fences(text))
    if candidate is None:
        raise ValueError(f"Could not extract JSON from text: {text[:200]}...")
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ValueError(f"Could not extract JSON from text: {e}") from e
