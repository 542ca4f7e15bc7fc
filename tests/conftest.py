"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from ai_edit.clients.llm_client import LLMClient, LLMResponse
from ai_edit.models.edit import EditRequest, VoiceProfile

VALID_RESPONSE = (
    '{"alternatives":['
    '{"label":"Option 1","text":"The launch moved to May."},'
    '{"label":"Option 2","text":"We pushed the launch to May."},'
    '{"label":"Option 3","text":"Launch is now planned for May."}'
    "]}"
)


@pytest.fixture
def sample_note() -> str:
    return """Launch plan

The team met on Monday. After reviewing the open issues we decided that the launch will be moved to May because QA needs more time.
Marketing will update the landing page next week."""


@pytest.fixture
def sample_request(sample_note) -> EditRequest:
    return EditRequest(
        action="shorter",
        document_title="Launch plan",
        document_body=sample_note,
        selected_text="we decided that the launch will be moved to May because QA needs more time",
        context_before="The team met on Monday. After reviewing the open issues ",
        context_after=".\nMarketing will update the landing page next week.",
    )


@pytest.fixture
def sample_profile() -> VoiceProfile:
    return VoiceProfile(
        tone="warm",
        audience="product team",
        languages=["en", "es"],
        style_notes="  short sentences  ",
    )


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client returning a valid three-option response."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text=VALID_RESPONSE, input_tokens=120, output_tokens=60)
    )
    return client
