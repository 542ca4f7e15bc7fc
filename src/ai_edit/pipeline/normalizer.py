"""Result normalizer - coerces parsed alternatives and drops empty ones."""

from __future__ import annotations

import json
from typing import Any

from ai_edit.models.edit import Alternative


def _as_text(value: Any) -> str:
    """Render a parsed JSON value the way it reads in the JSON itself."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def normalize(entries: list[Any]) -> list[Alternative]:
    """Turn raw ``alternatives`` entries into Alternative objects.

    Missing or blank labels become ``Option N`` (1-indexed by position in
    the model's list); entries whose text is blank are dropped. Returns an
    empty list when nothing usable remains.
    """
    result: list[Alternative] = []
    for i, entry in enumerate(entries):
        item = entry if isinstance(entry, dict) else {}
        label = _as_text(item.get("label"))
        text = _as_text(item.get("text"))
        if not text.strip():
            continue
        if not label.strip():
            label = f"Option {i + 1}"
        result.append(Alternative(label=label, text=text))
    return result
