"""Request boundary: validates inbound payloads and renders responses.

Any transport (HTTP function, CLI, worker) calls ``handle_edit`` and only
formats the returned ``(status, body)`` pair.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ai_edit.clients.llm_client import LLMClient
from ai_edit.config import AppConfig
from ai_edit.errors import EditError, RequestValidationError, UnknownActionError
from ai_edit.models.edit import Action, EditRequest
from ai_edit.pipeline.editor import SelectionEditor

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_WINDOW = 800


def create_editor(config: AppConfig, api_key: str | None = None) -> SelectionEditor:
    """Build an editor from config. Raises MissingCredentialError without a key."""
    llm = LLMClient(api_key=api_key, timeout=config.llm.timeout, model=config.llm.model)
    return SelectionEditor(
        llm,
        model=config.llm.model,
        max_tokens=config.llm.max_tokens,
        creative_temperature=config.edit.creative_temperature,
        corrective_temperature=config.edit.corrective_temperature,
    )


def truncate_context(before: str | None, after: str | None, window: int = DEFAULT_CONTEXT_WINDOW) -> tuple[str, str]:
    """Keep the ``window`` chars nearest the selection on each side."""
    before = before or ""
    after = after or ""
    if window <= 0:
        return "", ""
    return before[-window:], after[:window]


def context_from_note(note: str, selection: str, window: int = DEFAULT_CONTEXT_WINDOW) -> tuple[str, str]:
    """Cut before/after context around the first occurrence of ``selection``.

    Returns two empty strings when the selection is not in the note.
    """
    needle = selection.strip()
    index = note.find(needle) if needle else -1
    if index == -1:
        return "", ""
    return truncate_context(note[:index], note[index + len(needle):], window)


def _first(data: dict, *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def parse_edit_request(payload: Any, context_window: int = DEFAULT_CONTEXT_WINDOW) -> EditRequest:
    """Validate an inbound payload into an EditRequest.

    Checks run in a fixed order so the first problem is the one reported.
    Raises RequestValidationError (UnknownActionError for unknown actions).
    """
    if not isinstance(payload, dict):
        raise RequestValidationError("Invalid JSON body")

    action = payload.get("action")
    if not action or not isinstance(action, str):
        raise RequestValidationError('Missing or invalid "action"')

    selected = _first(payload, "selectedText", "selected_text")
    if not isinstance(selected, str) or not selected.strip():
        raise RequestValidationError('Missing or empty "selectedText"')

    if action not in Action.values():
        raise UnknownActionError(action)

    data = dict(payload)
    # Legacy shape: {"selectionContext": {"before": ..., "after": ...}}
    selection_context = data.pop("selectionContext", None)
    if isinstance(selection_context, dict):
        data.setdefault("before", selection_context.get("before"))
        data.setdefault("after", selection_context.get("after"))

    tone_value = _optional_str(
        _first(data, "toneValue", "tone_value", "tone")
    )
    if action == Action.TONE and not (tone_value and tone_value.strip()):
        raise RequestValidationError('"tone" value is required when action is "tone"')

    before = _first(data, "contextBefore", "context_before", "before")
    after = _first(data, "contextAfter", "context_after", "after")
    before, after = truncate_context(_optional_str(before), _optional_str(after), context_window)

    try:
        return EditRequest.model_validate({
            "action": action,
            "tone_value": tone_value,
            "document_title": _optional_str(
                _first(data, "documentTitle", "document_title", "noteTitle")
            ),
            "document_body": _optional_str(
                _first(data, "documentBody", "document_body", "noteContent")
            ),
            "selected_text": selected,
            "context_before": before or None,
            "context_after": after or None,
            "voice_profile": _first(data, "voiceProfile", "voice_profile", "userProfile"),
        })
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ()))
        raise RequestValidationError(f"Invalid {field or 'request'}: {first.get('msg')}") from e


async def handle_edit(
    payload: Any,
    editor: SelectionEditor,
    *,
    context_window: int = DEFAULT_CONTEXT_WINDOW,
) -> tuple[int, dict]:
    """Run one edit and map the result to ``(status, body)``.

    Recovery failures are 200 responses with an ``error`` body; validation,
    transport and backend failures use 4xx/5xx statuses.
    """
    try:
        request = parse_edit_request(payload, context_window=context_window)
    except RequestValidationError as e:
        logger.info("Rejected edit request: %s", e.message)
        return e.status_code, e.to_payload()

    try:
        run = await editor.edit(request)
    except EditError as e:
        logger.error("Edit failed: %s", e.message)
        return e.status_code, e.to_payload()

    return 200, run.outcome.to_payload()
