"""Response recovery - turns untrusted model text into a RecoveryOutcome."""

from __future__ import annotations

import logging

from ai_edit.models.outcome import (
    EmptyResult,
    ParseFailure,
    RecoveryOutcome,
    SchemaFailure,
    Success,
)
from ai_edit.pipeline.normalizer import normalize
from ai_edit.utils.json_parser import extract_json

logger = logging.getLogger(__name__)


def recover(raw_text: str) -> RecoveryOutcome:
    """Recover alternatives from a raw model response.

    Never raises on bad content: unreadable text is a ParseFailure carrying
    the original text, a wrong shape is a SchemaFailure, and a valid shape
    with no usable text is an EmptyResult.
    """
    try:
        parsed = extract_json(raw_text)
    except ValueError:
        logger.error("JSON parse failed. Raw: %r", raw_text)
        return ParseFailure(raw_text=raw_text)

    alternatives = parsed.get("alternatives") if isinstance(parsed, dict) else None
    if not isinstance(alternatives, list):
        logger.error("bad_schema. Parsed: %r", parsed)
        return SchemaFailure(parsed_value=parsed)

    normalized = normalize(alternatives)
    if not normalized:
        logger.warning("Model returned %d alternatives, none with text", len(alternatives))
        return EmptyResult()

    logger.debug("Recovered %d alternatives", len(normalized))
    return Success(alternatives=normalized)
