"""Async LLM provider for OpenAI-compatible chat completion APIs."""

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

import httpx

from .base import (
    LLMMessage,
    LLMProvider,
    LLMProviderAPIError,
    LLMProviderAuthError,
    LLMProviderError,
    LLMProviderRateLimitError,
    LLMResponse,
)

CHAT_COMPLETIONS_PATH = "/chat/completions"


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return
    status = response.status_code
    if status in (401, 403):
        raise LLMProviderAuthError(f"OpenAI authentication failed: {response.text}")
    if status == 429:
        raise LLMProviderRateLimitError("OpenAI rate limit exceeded")
    raise LLMProviderAPIError(f"OpenAI API error ({status}): {response.text}")


class OpenAIProvider(LLMProvider):
    """Chat completions over plain HTTP.

    Works against any server exposing the OpenAI chat completions route,
    selected with ``base_url``.
    """

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        *,
        base_url: str | None = None,
        timeout: float = 40.0,
        **kwargs: Any,
    ) -> None:
        self.base_url = (base_url or "https://api.openai.com/v1").rstrip("/")
        self.timeout = timeout
        super().__init__(api_key, model, **kwargs)

    def _setup_client(self, **kwargs: Any) -> None:
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"Authorization": f"Bearer {self.api_key}"},
        )

    async def _complete(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self._client.post(CHAT_COMPLETIONS_PATH, json=payload)
        except httpx.RequestError as exc:
            raise LLMProviderAPIError(f"OpenAI request error: {exc}") from exc

        _raise_for_status(response)
        try:
            return response.json()
        except ValueError as exc:
            raise LLMProviderAPIError(f"OpenAI returned malformed JSON: {exc}") from exc

    async def generate_response(
        self,
        messages: List[LLMMessage],
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        **kwargs: Any,
    ) -> LLMResponse:
        start_time = time.time()

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [msg.model_dump() for msg in messages],
        }
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        if temperature is not None:
            payload["temperature"] = temperature
        payload.update({k: v for k, v in kwargs.items() if v is not None})

        data = await self._complete(payload)

        choices = data.get("choices") or []
        if not choices:
            raise LLMProviderError("OpenAI response missing choices")

        choice = choices[0]
        message = choice.get("message") or {}
        if message.get("refusal"):
            # A refusal carries no advice; callers treat empty content as "no answer"
            self.logger.warning("Model refused the request: %s", message["refusal"])
            content = ""
        else:
            content = self._text_of(message.get("content"))

        usage = data.get("usage") or {}
        return LLMResponse(
            content=content or None,
            tokens_used=usage.get("total_tokens"),
            model=data.get("model") or self.model,
            finish_reason=choice.get("finish_reason"),
            response_time_ms=self._measure_time(start_time),
        )

    async def close(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _text_of(content: Any) -> str:
        """Content is a string, or a list of typed parts on newer models."""
        if content is None:
            return ""
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            return "".join(
                part if isinstance(part, str) else str(part.get("text") or "")
                for part in content
                if isinstance(part, (str, dict))
            )
        return str(content)
