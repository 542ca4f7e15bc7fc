"""Tests for the prompt compiler."""

import pytest

from ai_edit.models.edit import Action, EditRequest, VoiceProfile
from ai_edit.pipeline.action_registry import ACTION_TEMPLATES, build_tone_template, lookup
from ai_edit.pipeline.prompt_compiler import (
    BASE_RULES,
    PROFILE_HEADER,
    build_output_directive,
    build_profile_context,
    build_user_message,
    compile_prompt,
)


def _request(action: str = "rewrite", **kwargs) -> EditRequest:
    return EditRequest(action=action, selected_text=kwargs.pop("selected_text", "Some text."), **kwargs)


class TestSystemInstructions:
    @pytest.mark.parametrize("action", [a.value for a in Action])
    def test_contains_cardinality(self, action):
        request = _request(action, tone_value="Casual" if action == "tone" else None)
        compiled = compile_prompt(request)
        count = 3 if action == "tone" else lookup(action).expected_alternative_count
        assert f"exactly {count} alternatives" in compiled.system_instructions
        assert f'"label":"Option {count}"' in compiled.system_instructions
        assert f'"label":"Option {count + 1}"' not in compiled.system_instructions

    def test_block_order(self, sample_profile):
        template = lookup("fix")
        system = compile_prompt(_request("fix", voice_profile=sample_profile), template).system_instructions
        base = system.index("You are a world-class editor")
        profile = system.index(PROFILE_HEADER)
        action = system.index(template.instruction_text)
        directive = system.index("Return ONLY valid JSON")
        assert base < profile < action < directive

    def test_starts_with_base_rules(self):
        system = compile_prompt(_request()).system_instructions
        assert system.startswith(BASE_RULES)

    def test_forbids_prose_and_fences(self):
        directive = build_output_directive(2)
        assert "No prose" in directive
        assert "code fences" in directive

    def test_no_profile_block_without_profile(self):
        system = compile_prompt(_request()).system_instructions
        assert "AUTHOR PROFILE" not in system

    def test_no_profile_block_for_empty_profile(self):
        system = compile_prompt(_request(voice_profile=VoiceProfile())).system_instructions
        assert "AUTHOR PROFILE" not in system

    def test_tone_instruction(self):
        request = _request("tone", tone_value="Professional")
        system = compile_prompt(request).system_instructions
        assert build_tone_template("Professional").instruction_text in system

    def test_explicit_template_used(self):
        request = _request("rewrite")
        system = compile_prompt(request, lookup("bullets")).system_instructions
        assert lookup("bullets").instruction_text in system
        assert "exactly 2 alternatives" in system


class TestProfileContext:
    def test_none(self):
        assert build_profile_context(None) == ""

    def test_present_fields_only(self, sample_profile):
        block = build_profile_context(sample_profile)
        assert "• Preferred tone: warm" in block
        assert "• Target audience: product team" in block
        assert "• Languages: en, es" in block
        assert "• Style notes: short sentences" in block
        assert "Writing intent" not in block
        assert "Register" not in block

    def test_blank_style_notes_omitted(self):
        assert build_profile_context(VoiceProfile(style_notes="   ")) == ""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(10, "conversational and informal"), (50, "semi-formal"), (90, "formal and professional")],
    )
    def test_formal_slider(self, value, expected):
        assert f"• Register: {expected}" in build_profile_context(VoiceProfile(formal=value))

    def test_other_sliders(self):
        block = build_profile_context(VoiceProfile(concise=80, opinionated=0))
        assert "• Length style: very concise and tight" in block
        assert "• Stance: neutral and objective" in block

    def test_chips_and_learned_text(self):
        profile = VoiceProfile.model_validate({
            "chips": [{"label": "Tone", "value": "dry, wry"}],
            "learned_text": "  Opens with a question.  ",
        })
        block = build_profile_context(profile)
        assert block.startswith(PROFILE_HEADER)
        assert "• Voice: Tone: dry, wry" in block
        assert "• Voice notes: Opens with a question." in block


class TestUserMessage:
    def test_placeholders(self):
        message = build_user_message(_request(selected_text="Hello"))
        assert message == "\n".join([
            "TITLE:",
            "(untitled)",
            "",
            "FULL NOTE:",
            "(empty)",
            "",
            "SELECTION:",
            "Hello",
            "",
            "SURROUNDING CONTEXT:",
            "BEFORE:",
            "(start of note)",
            "AFTER:",
            "(end of note)",
            "",
            "ACTION:",
            "rewrite",
        ])

    def test_fields_in_order(self, sample_request):
        message = build_user_message(sample_request)
        positions = [
            message.index("Launch plan"),
            message.index("The team met on Monday"),
            message.index("SELECTION:\n" + sample_request.selected_text),
            message.index("BEFORE:\n" + sample_request.context_before),
            message.index("AFTER:\n" + sample_request.context_after),
            message.index("ACTION:\nshorter"),
        ]
        assert positions == sorted(positions)

    def test_tone_descriptor(self):
        message = build_user_message(_request("tone", tone_value="Casual"))
        assert message.endswith("ACTION:\ntone (tone: Casual)")

    def test_tone_value_ignored_for_other_actions(self):
        message = build_user_message(_request("fix", tone_value="Casual"))
        assert message.endswith("ACTION:\nfix")

    def test_context_not_truncated_here(self):
        long_before = "x" * 5000
        message = build_user_message(_request(context_before=long_before))
        assert long_before in message


class TestDeterminism:
    @pytest.mark.parametrize("action", list(ACTION_TEMPLATES))
    def test_idempotent(self, action, sample_profile):
        request = _request(action, document_title="T", voice_profile=sample_profile)
        first = compile_prompt(request)
        second = compile_prompt(request)
        assert first.system_instructions == second.system_instructions
        assert first.user_message == second.user_message

    def test_equal_requests_compile_equal(self):
        a = compile_prompt(_request("tone", tone_value="Strong"))
        b = compile_prompt(_request("tone", tone_value="Strong"))
        assert a == b
