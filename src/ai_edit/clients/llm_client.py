"""Claude API wrapper used as the edit pipeline's text generator."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

import anthropic

from ai_edit.errors import BackendError, MissingCredentialError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_TIMEOUT = 30.0


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    input_tokens: int
    output_tokens: int


class LLMClient:
    """Async Claude API client making exactly one attempt per call.

    Retries are the caller's decision, so the SDK's own retry loop is
    disabled. Every call is bounded by ``timeout`` seconds. The client keeps
    no per-call state; token usage comes back on each LLMResponse.
    """

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        model: str = DEFAULT_MODEL,
    ):
        key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        if not key:
            raise MissingCredentialError()
        self.client = anthropic.AsyncAnthropic(api_key=key, timeout=timeout, max_retries=0)
        self.model = model

    async def _call_api(
        self,
        prompt: str,
        system: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> anthropic.types.Message:
        messages = [{"role": "user", "content": prompt}]
        kwargs: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": messages,
        }
        if system:
            kwargs["system"] = system
        return await self.client.messages.create(**kwargs)

    async def generate(
        self,
        prompt: str,
        system: str = "",
        model: str | None = None,
        temperature: float = 0.0,
        max_tokens: int = 2000,
    ) -> LLMResponse:
        """Send a prompt to Claude and return the text response with usage.

        Raises:
            TransportError: connection, DNS or timeout failure.
            BackendError: the API answered with a non-success status.
        """
        model = model or self.model
        logger.debug("LLM call: model=%s temperature=%.2f", model, temperature)
        try:
            message = await self._call_api(
                prompt=prompt,
                system=system,
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except anthropic.APIStatusError as e:
            logger.error("Anthropic API error: %s %s", e.status_code, e.message)
            raise BackendError(e.status_code, detail=str(e.message)) from e
        except anthropic.APIConnectionError as e:
            # APITimeoutError is a subclass of APIConnectionError
            logger.error("Anthropic network error", exc_info=True)
            raise TransportError() from e

        input_tokens = message.usage.input_tokens
        output_tokens = message.usage.output_tokens
        logger.debug("LLM response: %d input, %d output tokens", input_tokens, output_tokens)
        text = ""
        if message.content:
            text = getattr(message.content[0], "text", "") or ""
        return LLMResponse(
            text=text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
