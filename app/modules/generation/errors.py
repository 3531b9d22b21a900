"""Error taxonomy for the generation pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class GenerationError(Exception):
    """Base class for generation failures."""


class ConfigurationError(GenerationError):
    """No credential is configured for a provider family."""

    def __init__(self, provider: str, message: str | None = None) -> None:
        self.provider = provider
        super().__init__(message or f"{provider} is not configured")


class InvalidInputError(GenerationError):
    """Request rejected before any prompt was built."""


class FailureKind(str, Enum):
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    AUTH = "auth"
    TRANSPORT = "transport"
    OTHER = "other"


class ProviderError(GenerationError):
    """A single provider call did not report success."""

    def __init__(
        self,
        *,
        provider: str,
        model: str,
        status: Optional[int],
        status_text: str = "",
        body: str = "",
    ) -> None:
        self.provider = provider
        self.model = model
        self.status = status
        self.status_text = status_text
        self.body = body
        super().__init__(
            f"{provider} {status if status is not None else '-'} {status_text} - model={model} - {body}"
        )

    @property
    def kind(self) -> FailureKind:
        if self.status is None:
            return FailureKind.TRANSPORT
        if self.status == 404:
            return FailureKind.NOT_FOUND
        if self.status == 429:
            return FailureKind.RATE_LIMITED
        if self.status in (401, 403):
            return FailureKind.AUTH
        return FailureKind.OTHER


class AllCandidatesExhausted(GenerationError):
    """Every candidate in a fallback chain failed."""

    def __init__(self, last_error: Optional[Exception], attempted: list[str]) -> None:
        self.last_error = last_error
        self.attempted = attempted
        detail = str(last_error) if last_error else "no candidates"
        super().__init__(f"All model attempts failed ({', '.join(attempted) or '-'}): {detail}")
