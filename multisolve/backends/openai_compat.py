"""OpenAI-compatible backend (OpenAI, OpenRouter, xAI, DeepSeek...) using openai SDK with native async."""

import asyncio
import logging
import os
import time

from openai import APIStatusError, AsyncOpenAI

from config.config_loader import BackendConfig
from multisolve.backends.base import EmptyResponse, TextBackend, TransportError, error_from_status
from multisolve.models import BackendResponse

logger = logging.getLogger(__name__)


class OpenAICompatBackend(TextBackend):
    """Chat-completions backend via openai SDK, optionally against a custom base_url."""

    def __init__(self, config: BackendConfig) -> None:
        self._config = config
        api_key = os.environ.get(config.api_key_env, "").strip()
        if not api_key:
            raise TransportError(config.name, f"Missing API key: {config.api_key_env}")
        self._client = AsyncOpenAI(api_key=api_key, base_url=config.base_url)

    def name(self) -> str:
        return self._config.name

    def model_string(self) -> str:
        return self._config.model

    async def generate(self, prompt: str, max_tokens: int) -> BackendResponse:
        start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self._client.chat.completions.create(
                    model=self._config.model,
                    messages=[{"role": "user", "content": prompt}],
                    max_tokens=max_tokens,
                ),
                timeout=self._config.timeout_sec,
            )
        except TimeoutError as exc:
            raise TransportError(self._config.name, f"Request timed out after {self._config.timeout_sec}s") from exc
        except APIStatusError as exc:
            raise error_from_status(self._config.name, exc.status_code, f"API call failed: {exc}") from exc
        except Exception as exc:
            raise TransportError(self._config.name, f"API call failed: {exc}") from exc

        latency = time.monotonic() - start

        choice = response.choices[0] if response.choices else None
        if not choice or not choice.message.content:
            raise EmptyResponse(self._config.name, "Empty response content")

        token_count: int | None = None
        if response.usage:
            token_count = response.usage.total_tokens

        logger.debug("%s: %.2fs, %s tokens", self._config.name, latency, token_count)

        return BackendResponse(
            backend=self._config.name,
            model=self._config.model,
            content=choice.message.content,
            latency_sec=latency,
            token_count=token_count,
        )
