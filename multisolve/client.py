"""Backend client: one request to one named backend, failures returned as values."""

import logging
from typing import Any

from multisolve.backends.base import (
    BackendError,
    MalformedPayload,
    TextBackend,
    TransportError,
    error_from_status,
    status_code_of,
)
from multisolve.models import BackendResponse
from multisolve.parsing import extract_json

logger = logging.getLogger(__name__)


class BackendClient:
    """Routes calls by backend name. invoke() and invoke_json() never raise."""

    def __init__(self, backends: dict[str, TextBackend]) -> None:
        self._backends = dict(backends)

    def has(self, backend_id: str) -> bool:
        return backend_id in self._backends

    async def invoke(
        self,
        backend_id: str,
        prompt: str,
        max_tokens: int,
    ) -> BackendResponse | BackendError:
        """Send one prompt. Returns BackendError on any failure."""
        backend = self._backends.get(backend_id)
        if backend is None:
            err: BackendError = TransportError(backend_id, "Backend not available (unknown name or missing API key)")
            logger.warning("%s", err)
            return err

        try:
            return await backend.generate(prompt, max_tokens)
        except BackendError as exc:
            logger.warning("Backend %s failed: %s", backend_id, exc)
            return exc
        except Exception as exc:
            err = error_from_status(backend_id, status_code_of(exc), f"Unexpected error: {exc}")
            logger.warning("Backend %s unexpected failure: %s", backend_id, exc)
            return err

    async def invoke_json(
        self,
        backend_id: str,
        prompt: str,
        max_tokens: int,
    ) -> Any | BackendError:
        """invoke() then extract_json(). A parse failure comes back as MalformedPayload."""
        result = await self.invoke(backend_id, prompt, max_tokens)
        if isinstance(result, BackendError):
            return result
        try:
            return extract_json(result.content, backend_id)
        except MalformedPayload as exc:
            logger.warning("Backend %s returned unparseable output: %s", backend_id, exc)
            return exc
