"""Sequential fallback across (provider, model) candidates.

Candidates are assumed to be different backends rather than retries of one
flaky backend, so the chain is a single linear pass with no delay between
attempts and no parallel speculative calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, NamedTuple, Optional, Union

from app.core.logging import get_logger
from app.modules.generation.errors import (
    AllCandidatesExhausted,
    ConfigurationError,
    FailureKind,
    ProviderError,
)
from app.modules.generation.providers import ProviderClient

logger = get_logger(__name__)


class Candidate(NamedTuple):
    provider: str
    model: str

    def __str__(self) -> str:
        return f"{self.provider}:{self.model}"


Payload = Union[dict[str, Any], Callable[[Candidate], dict[str, Any]]]


@dataclass
class FallbackResult:
    response: Any
    used_model: Candidate
    failures: list[Exception] = field(default_factory=list)


def build_candidates(
    provider: str,
    configured: Iterable[Optional[str]] | Optional[str],
    defaults: Iterable[str] = (),
) -> list[Candidate]:
    """Configured models first, then defaults; blanks and repeats dropped."""
    if configured is None or isinstance(configured, str):
        configured = [configured]
    out: list[Candidate] = []
    seen: set[str] = set()
    for model in [*configured, *defaults]:
        if not model or not model.strip():
            continue
        model = model.strip()
        if model in seen:
            continue
        seen.add(model)
        out.append(Candidate(provider, model))
    return out


async def try_in_order(
    clients: Mapping[str, ProviderClient],
    candidates: Iterable[Candidate],
    payload: Payload,
) -> FallbackResult:
    """Return the first successful response, or raise ``AllCandidatesExhausted``.

    A missing credential disables every remaining candidate of that provider
    family; any other failure only skips the candidate that raised it.
    """
    failures: list[Exception] = []
    attempted: list[str] = []
    unconfigured: set[str] = set()
    last_error: Optional[Exception] = None

    for candidate in candidates:
        if candidate.provider in unconfigured:
            continue
        client = clients.get(candidate.provider)
        if client is None:
            last_error = ConfigurationError(candidate.provider, f"no client for {candidate.provider}")
            unconfigured.add(candidate.provider)
            failures.append(last_error)
            continue

        attempted.append(str(candidate))
        logger.debug("trying model: %s", candidate)
        body = payload(candidate) if callable(payload) else payload
        try:
            response = await client.call(candidate.model, body)
        except ConfigurationError as e:
            logger.warning("%s not configured, skipping its candidates", candidate.provider)
            unconfigured.add(candidate.provider)
            last_error = e
            failures.append(e)
            continue
        except ProviderError as e:
            last_error = e
            failures.append(e)
            if e.kind is FailureKind.NOT_FOUND:
                logger.warning("Model %s not found (404), trying next fallback... - %s", candidate, e)
            else:
                logger.warning(
                    "Model %s failed (%s), trying next fallback: %s", candidate, e.kind.value, e
                )
            continue
        return FallbackResult(response=response, used_model=candidate, failures=failures)

    raise AllCandidatesExhausted(last_error, attempted) from last_error
