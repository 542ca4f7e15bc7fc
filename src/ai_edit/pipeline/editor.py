"""Selection editor - runs one edit request through the full pipeline."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from ai_edit.clients.llm_client import LLMClient
from ai_edit.errors import TransportError
from ai_edit.models.edit import ActionTemplate, EditRequest
from ai_edit.models.outcome import RecoveryOutcome
from ai_edit.pipeline.action_registry import CREATIVE_ACTIONS
from ai_edit.pipeline.prompt_compiler import CompiledPrompt, compile_prompt, template_for
from ai_edit.pipeline.response_recovery import recover

logger = logging.getLogger(__name__)


@dataclass
class EditRun:
    """Outcome of one edit plus the data needed to diagnose it."""

    outcome: RecoveryOutcome
    template: ActionTemplate
    prompt: CompiledPrompt
    raw_text: str
    input_tokens: int = 0
    output_tokens: int = 0
    elapsed_seconds: float = 0.0


class SelectionEditor:
    """Generate alternative rewrites for a selected passage of a note."""

    def __init__(
        self,
        llm: LLMClient,
        *,
        model: str | None = None,
        max_tokens: int = 2000,
        creative_temperature: float | None = None,
        corrective_temperature: float | None = None,
    ):
        self.llm = llm
        self.model = model
        self.max_tokens = max_tokens
        self.creative_temperature = creative_temperature
        self.corrective_temperature = corrective_temperature

    def resolve_template(self, request: EditRequest) -> ActionTemplate:
        """Registry template, with configured temperatures applied."""
        template = template_for(request)
        if request.action in CREATIVE_ACTIONS:
            override = self.creative_temperature
        else:
            override = self.corrective_temperature
        if override is None:
            return template
        return template.model_copy(update={"sampling_temperature": override})

    async def edit(self, request: EditRequest) -> EditRun:
        """Compile, call the generator once, and recover the alternatives.

        TransportError and BackendError propagate; bad model output comes
        back as a non-success outcome on the returned run.
        """
        start = time.monotonic()
        template = self.resolve_template(request)
        prompt = compile_prompt(request, template)

        logger.info(
            "Editing selection: action=%s chars=%d expected=%d",
            request.action.value,
            len(request.selected_text),
            template.expected_alternative_count,
        )
        response = await self.llm.generate(
            prompt=prompt.user_message,
            system=prompt.system_instructions,
            model=self.model,
            temperature=template.sampling_temperature,
            max_tokens=self.max_tokens,
        )

        outcome = recover(response.text)
        elapsed = time.monotonic() - start
        logger.info("Edit finished: outcome=%s elapsed=%.2fs", outcome.kind, elapsed)
        return EditRun(
            outcome=outcome,
            template=template,
            prompt=prompt,
            raw_text=response.text,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
            elapsed_seconds=elapsed,
        )


async def edit_with_retries(
    editor: SelectionEditor,
    request: EditRequest,
    attempts: int = 1,
) -> EditRun:
    """Caller-side retry policy: repeat ``editor.edit`` on TransportError only.

    Backend status errors and recovery outcomes are never retried.
    """
    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(max(1, attempts)),
        wait=wait_exponential(min=1, max=10),
        retry=retry_if_exception_type(TransportError),
        reraise=True,
    ):
        with attempt:
            run = await editor.edit(request)
    return run
