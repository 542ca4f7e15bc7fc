"""Prompt compiler - turns an edit request and its template into model input."""

from __future__ import annotations

from dataclasses import dataclass

from ai_edit.models.edit import Action, ActionTemplate, EditRequest, VoiceProfile
from ai_edit.pipeline import action_registry

BASE_RULES = """\
You are a world-class editor inside a writing app.
You will receive: note title, full note text, the exact selected text, and surrounding context.
Your job: produce alternative rewrites of ONLY the selected text.
Rules:
• Do NOT edit anything outside the selection.
• Keep consistent with the note's voice, terminology, and style.
• Do NOT introduce new facts not already present in the note or selection.
• Keep the same language as the selection (unless the action explicitly changes tone/style).
• Keep roughly the same length unless the action calls for expansion or condensation."""

PROFILE_HEADER = "AUTHOR PROFILE (adapt your output to match these preferences):"

OUTPUT_DIRECTIVE = """\
Return ONLY valid JSON. No prose, no explanations, no markdown code fences.
Schema (exactly {count} alternatives, keys "label" and "text"):
{schema}"""

UNTITLED = "(untitled)"
EMPTY_NOTE = "(empty)"
START_OF_NOTE = "(start of note)"
END_OF_NOTE = "(end of note)"


@dataclass(frozen=True)
class CompiledPrompt:
    system_instructions: str
    user_message: str


def _slider(value: int, low: str, mid: str, high: str) -> str:
    if value < 34:
        return low
    if value > 66:
        return high
    return mid


def build_profile_context(profile: VoiceProfile | None) -> str:
    """Render the author profile block, or '' when nothing is set."""
    if profile is None:
        return ""
    lines: list[str] = []
    if profile.tone:
        lines.append(f"• Preferred tone: {profile.tone}")
    if profile.audience:
        lines.append(f"• Target audience: {profile.audience}")
    if profile.intent:
        lines.append(f"• Writing intent: {profile.intent}")
    if profile.languages:
        lines.append(f"• Languages: {', '.join(profile.languages)}")
    if profile.style_notes and profile.style_notes.strip():
        lines.append(f"• Style notes: {profile.style_notes.strip()}")
    chips = profile.chip_summary()
    if chips:
        lines.append(f"• Voice: {chips}")
    if profile.learned_text and profile.learned_text.strip():
        lines.append(f"• Voice notes: {profile.learned_text.strip()}")
    if profile.formal is not None:
        register = _slider(
            profile.formal, "conversational and informal", "semi-formal", "formal and professional"
        )
        lines.append(f"• Register: {register}")
    if profile.concise is not None:
        length = _slider(
            profile.concise, "expressive and elaborated", "balanced in length", "very concise and tight"
        )
        lines.append(f"• Length style: {length}")
    if profile.opinionated is not None:
        stance = _slider(
            profile.opinionated,
            "neutral and objective",
            "mildly opinionated",
            "strongly opinionated and direct",
        )
        lines.append(f"• Stance: {stance}")
    if not lines:
        return ""
    return PROFILE_HEADER + "\n" + "\n".join(lines)


def build_output_directive(count: int) -> str:
    entries = ",".join(
        f'{{"label":"Option {i}","text":"..."}}' for i in range(1, count + 1)
    )
    schema = f'{{"alternatives":[{entries}]}}'
    return OUTPUT_DIRECTIVE.format(count=count, schema=schema)


def build_system_instructions(template: ActionTemplate, profile: VoiceProfile | None = None) -> str:
    blocks = [BASE_RULES]
    profile_block = build_profile_context(profile)
    if profile_block:
        blocks.append(profile_block)
    blocks.append(template.instruction_text)
    blocks.append(build_output_directive(template.expected_alternative_count))
    return "\n\n".join(blocks)


def action_descriptor(request: EditRequest) -> str:
    if request.action is Action.TONE and request.tone_value:
        return f"{request.action.value} (tone: {request.tone_value.strip()})"
    return request.action.value


def build_user_message(request: EditRequest) -> str:
    return "\n".join([
        "TITLE:",
        request.document_title or UNTITLED,
        "",
        "FULL NOTE:",
        request.document_body or EMPTY_NOTE,
        "",
        "SELECTION:",
        request.selected_text,
        "",
        "SURROUNDING CONTEXT:",
        "BEFORE:",
        request.context_before or START_OF_NOTE,
        "AFTER:",
        request.context_after or END_OF_NOTE,
        "",
        "ACTION:",
        action_descriptor(request),
    ])


def template_for(request: EditRequest) -> ActionTemplate:
    return action_registry.resolve(request.action, request.tone_value)


def compile_prompt(request: EditRequest, template: ActionTemplate | None = None) -> CompiledPrompt:
    """Build the system instructions and user message for one request.

    Pure and deterministic: the same request always compiles to the same
    strings.
    """
    if template is None:
        template = template_for(request)
    return CompiledPrompt(
        system_instructions=build_system_instructions(template, request.voice_profile),
        user_message=build_user_message(request),
    )
