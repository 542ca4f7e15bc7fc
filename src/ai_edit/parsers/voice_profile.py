"""Load an author voice profile from a YAML or JSON file."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ai_edit.models.edit import VoiceProfile

logger = logging.getLogger(__name__)


def load_voice_profile(path: str | Path) -> VoiceProfile | None:
    """Read a profile file; returns None when it sets no preferences.

    Accepts either a bare mapping or one nested under ``voice_profile``.
    Raises FileNotFoundError for a missing file and ValueError for a
    malformed one.
    """
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() == ".json":
        raw = json.loads(text) if text.strip() else {}
    else:
        raw = yaml.safe_load(text) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Voice profile must be a mapping: {p}")
    raw = raw.get("voice_profile", raw)

    # Accept a comma separated string for languages
    languages = raw.get("languages")
    if isinstance(languages, str):
        raw = {**raw, "languages": [lang.strip() for lang in languages.split(",") if lang.strip()]}

    try:
        profile = VoiceProfile.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"Invalid voice profile {p}: {e}") from e

    if profile.is_empty():
        logger.info("Voice profile %s sets no preferences; ignoring", p)
        return None
    return profile
