"""Action registry - maps each edit action to its behavioral template."""

from __future__ import annotations

from types import MappingProxyType

from ai_edit.errors import UnknownActionError
from ai_edit.models.edit import Action, ActionTemplate

# Creative actions get more lexical variety; corrective ones stay close to the source.
CREATIVE_TEMPERATURE = 0.3
CORRECTIVE_TEMPERATURE = 0.2

CREATIVE_ACTIONS = frozenset({Action.TONE, Action.REWRITE, Action.EXAMPLE})

TONE_SKELETON = (
    "ACTION - Tone ({tone}): rewrite to match this tone: {tone}. "
    "Keep meaning identical. Do not add new facts."
)


def temperature_for(action: Action) -> float:
    return CREATIVE_TEMPERATURE if action in CREATIVE_ACTIONS else CORRECTIVE_TEMPERATURE


def _template(action: Action, text: str, count: int) -> ActionTemplate:
    return ActionTemplate(
        instruction_text=text,
        expected_alternative_count=count,
        sampling_temperature=temperature_for(action),
    )


# `tone` is deliberately absent: its text depends on the request (see build_tone_template).
ACTION_TEMPLATES: MappingProxyType[Action, ActionTemplate] = MappingProxyType({
    Action.REWRITE: _template(
        Action.REWRITE,
        "ACTION - Rewrite: improve flow and readability. Keep meaning identical.",
        3,
    ),
    Action.SHORTER: _template(
        Action.SHORTER,
        "ACTION - Shorter: condense the selection, remove redundancy, preserve core meaning. "
        "Trim without losing essential information.",
        3,
    ),
    Action.CLEARER: _template(
        Action.CLEARER,
        "ACTION - Clearer: simplify sentence structure, reduce jargon, improve comprehension. "
        "Do not change meaning.",
        3,
    ),
    Action.FIX: _template(
        Action.FIX,
        "ACTION - Fix: correct grammar, spelling, and punctuation. "
        "Option 1 = minimal fix (change as little as possible). "
        "Options 2-3 = slightly more polished but still fully faithful to original.",
        3,
    ),
    Action.EXPAND: _template(
        Action.EXPAND,
        "ACTION - Expand: elaborate slightly using ONLY ideas already present in the selection "
        "or note. Do NOT introduce new facts or examples not in the note.",
        2,
    ),
    Action.BULLETS: _template(
        Action.BULLETS,
        'ACTION - Bullets: convert the selection to a bullet list using "• " prefix for each '
        "item. Preserve ALL content, just restructure.",
        2,
    ),
    Action.EXAMPLE: _template(
        Action.EXAMPLE,
        "ACTION - Example: add a short, generic illustrative example that does NOT introduce "
        "unverifiable facts. If that is impossible, improve clarity instead.",
        3,
    ),
})


def build_tone_template(tone_value: str) -> ActionTemplate:
    """Fill the tone skeleton with the requested tone."""
    tone = tone_value.strip()
    if not tone:
        raise ValueError("tone_value must be non-empty")
    return _template(Action.TONE, TONE_SKELETON.format(tone=tone), 3)


def lookup(action: Action | str) -> ActionTemplate:
    """Return the static template for ``action``.

    Raises UnknownActionError for identifiers outside the registry, and a
    plain KeyError for ``tone``, which is built by ``build_tone_template``.
    """
    try:
        key = Action(action)
    except ValueError:
        raise UnknownActionError(str(action)) from None
    if key is Action.TONE:
        raise KeyError("tone has no static template; use build_tone_template(tone_value)")
    return ACTION_TEMPLATES[key]


def resolve(action: Action | str, tone_value: str | None = None) -> ActionTemplate:
    """Template for any registered action, building the tone one on demand."""
    if action == Action.TONE:
        if not tone_value or not tone_value.strip():
            raise ValueError('"tone" value is required when action is "tone"')
        return build_tone_template(tone_value)
    return lookup(action)
