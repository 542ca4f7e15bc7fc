"""Pydantic models for edit requests, action templates and alternatives."""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class Action(str, Enum):
    REWRITE = "rewrite"
    SHORTER = "shorter"
    CLEARER = "clearer"
    FIX = "fix"
    TONE = "tone"
    EXPAND = "expand"
    BULLETS = "bullets"
    EXAMPLE = "example"

    @classmethod
    def values(cls) -> list[str]:
        return [a.value for a in cls]


class ActionTemplate(BaseModel):
    """Behavioral contract for one action."""

    model_config = ConfigDict(frozen=True)

    instruction_text: str
    expected_alternative_count: Literal[2, 3]
    sampling_temperature: float = Field(ge=0.0, le=1.0)


class VoiceChip(BaseModel):
    """One learned trait of the author's voice, e.g. ``Tone: dry, wry``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    label: str = ""
    value: str = ""


class VoiceProfile(BaseModel):
    """Author preferences folded into the system instructions.

    Every field is optional; absent fields are left out of the prompt.
    The three sliders run 0-100 (low = informal / expressive / neutral) and
    may also arrive nested under ``sliders``, as the voice analyzer emits
    them alongside ``chips`` and ``learned_text``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    tone: str | None = None
    audience: str | None = None
    intent: str | None = None
    languages: list[str] = Field(default_factory=list)
    style_notes: str | None = None
    chips: list[VoiceChip] = Field(default_factory=list)
    learned_text: str | None = None
    formal: int | None = Field(default=None, ge=0, le=100)
    concise: int | None = Field(default=None, ge=0, le=100)
    opinionated: int | None = Field(default=None, ge=0, le=100)

    @model_validator(mode="before")
    @classmethod
    def _lift_sliders(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not isinstance(data.get("sliders"), dict):
            return data
        lifted = dict(data)
        for name in ("formal", "concise", "opinionated"):
            if lifted.get(name) is None:
                lifted[name] = data["sliders"].get(name)
        return lifted

    def chip_summary(self) -> str:
        """``label: value`` pairs joined with commas; chips without a value are skipped."""
        parts = []
        for chip in self.chips:
            value = chip.value.strip()
            if not value:
                continue
            label = chip.label.strip()
            parts.append(f"{label}: {value}" if label else value)
        return ", ".join(parts)

    def is_empty(self) -> bool:
        return not (
            self.tone
            or self.audience
            or self.intent
            or self.languages
            or (self.style_notes and self.style_notes.strip())
            or self.chip_summary()
            or (self.learned_text and self.learned_text.strip())
            or self.formal is not None
            or self.concise is not None
            or self.opinionated is not None
        )


class EditRequest(BaseModel):
    """One selection edit. Accepts camelCase and the legacy endpoint keys."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    action: Action
    tone_value: str | None = Field(
        default=None, validation_alias=AliasChoices("tone_value", "toneValue", "tone")
    )
    document_title: str | None = Field(
        default=None, validation_alias=AliasChoices("document_title", "documentTitle", "noteTitle")
    )
    document_body: str | None = Field(
        default=None, validation_alias=AliasChoices("document_body", "documentBody", "noteContent")
    )
    selected_text: str = Field(validation_alias=AliasChoices("selected_text", "selectedText"))
    context_before: str | None = Field(
        default=None, validation_alias=AliasChoices("context_before", "contextBefore", "before")
    )
    context_after: str | None = Field(
        default=None, validation_alias=AliasChoices("context_after", "contextAfter", "after")
    )
    voice_profile: VoiceProfile | None = Field(
        default=None, validation_alias=AliasChoices("voice_profile", "voiceProfile", "userProfile")
    )

    @field_validator("selected_text")
    @classmethod
    def _selection_not_blank(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError('Missing or empty "selectedText"')
        return trimmed

    @model_validator(mode="after")
    def _tone_needs_value(self) -> EditRequest:
        if self.action is Action.TONE and not (self.tone_value and self.tone_value.strip()):
            raise ValueError('"tone" value is required when action is "tone"')
        return self


class Alternative(BaseModel):
    label: str
    text: str
