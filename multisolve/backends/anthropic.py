"""Anthropic Claude backend using anthropic SDK with native async."""

import asyncio
import logging
import os
import time

import anthropic as anthropic_sdk

from config.config_loader import BackendConfig
from multisolve.backends.base import EmptyResponse, TextBackend, TransportError, error_from_status
from multisolve.models import BackendResponse

logger = logging.getLogger(__name__)


class AnthropicBackend(TextBackend):
    """Anthropic Claude backend via anthropic SDK."""

    def __init__(self, config: BackendConfig) -> None:
        self._config = config
        api_key = os.environ.get(config.api_key_env, "").strip()
        if not api_key:
            raise TransportError(config.name, f"Missing API key: {config.api_key_env}")
        self._client = anthropic_sdk.AsyncAnthropic(api_key=api_key)

    def name(self) -> str:
        return self._config.name

    def model_string(self) -> str:
        return self._config.model

    async def generate(self, prompt: str, max_tokens: int) -> BackendResponse:
        start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self._client.messages.create(
                    model=self._config.model,
                    max_tokens=max_tokens,
                    messages=[{"role": "user", "content": prompt}],
                ),
                timeout=self._config.timeout_sec,
            )
        except TimeoutError as exc:
            raise TransportError(self._config.name, f"Request timed out after {self._config.timeout_sec}s") from exc
        except anthropic_sdk.APIStatusError as exc:
            raise error_from_status(self._config.name, exc.status_code, f"API call failed: {exc}") from exc
        except Exception as exc:
            raise TransportError(self._config.name, f"API call failed: {exc}") from exc

        latency = time.monotonic() - start

        text_blocks = [b.text for b in response.content or [] if b.type == "text"]
        if not text_blocks:
            raise EmptyResponse(self._config.name, "No text blocks in response")

        token_count: int | None = None
        if response.usage:
            token_count = response.usage.input_tokens + response.usage.output_tokens

        logger.debug("%s: %.2fs, %s tokens", self._config.name, latency, token_count)

        return BackendResponse(
            backend=self._config.name,
            model=self._config.model,
            content="\n".join(text_blocks),
            latency_sec=latency,
            token_count=token_count,
        )
