"""Abstract base for all text-generation backends, plus the backend error taxonomy."""

from abc import ABC, abstractmethod

from multisolve.models import BackendResponse

QUOTA_STATUS_CODE = 402


class BackendError(Exception):
    """Base for every recoverable backend failure."""

    def __init__(self, backend_name: str, message: str) -> None:
        self.backend_name = backend_name
        super().__init__(f"[{backend_name}] {message}")


class TransportError(BackendError):
    """Network/HTTP failure, timeout, or a backend that is not available."""

    def __init__(self, backend_name: str, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(backend_name, message)


class QuotaExceeded(TransportError):
    """Payment/quota exhausted. Worth trying another backend, not this one again."""

    def __init__(self, backend_name: str, message: str = "Quota or credits exhausted") -> None:
        super().__init__(backend_name, message, status_code=QUOTA_STATUS_CODE)


class EmptyResponse(BackendError):
    """Backend answered but returned no completion text."""


class MalformedPayload(BackendError):
    """Completion text could not be parsed, or lacked the expected field."""


def error_from_status(backend_name: str, status_code: int | None, message: str) -> TransportError:
    if status_code == QUOTA_STATUS_CODE:
        return QuotaExceeded(backend_name, f"{message} (status {status_code})")
    return TransportError(backend_name, message, status_code=status_code)


def status_code_of(exc: BaseException) -> int | None:
    """Pull an HTTP status out of an SDK exception (openai/anthropic use status_code, google-genai uses code)."""
    for attr in ("status_code", "code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


class TextBackend(ABC):
    """Abstract base for all text-generation backends."""

    @abstractmethod
    def name(self) -> str:
        """Return the configured backend name (e.g. 'gpt-4o-mini')."""
        ...

    @abstractmethod
    def model_string(self) -> str:
        """Return the actual model identifier string."""
        ...

    @abstractmethod
    async def generate(self, prompt: str, max_tokens: int) -> BackendResponse:
        """Generate a completion for the given prompt.

        Args:
            prompt: The full prompt text to send.
            max_tokens: Output-length budget for this call.

        Returns:
            BackendResponse dataclass with content and metadata.

        Raises:
            TransportError: On API failure or timeout (QuotaExceeded on 402).
            EmptyResponse: When the response carries no completion text.
        """
        ...
