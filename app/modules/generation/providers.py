"""Single-attempt HTTP clients for the text-generation providers.

Each ``call`` issues exactly one request. Retrying and falling back between
models is left to :mod:`app.modules.generation.fallback`.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

import httpx

from app.core.logging import get_logger
from app.modules.generation.config import GenerationConfig
from app.modules.generation.errors import ConfigurationError, ProviderError
from app.modules.generation.normalize import to_json

HUGGINGFACE = "huggingface"
GEMINI = "gemini"

logger = get_logger(__name__)


class ProviderClient(Protocol):
    provider: str

    async def call(self, model: str, payload: dict[str, Any]) -> Any: ...


def text_payload(prompt: str, *, max_new_tokens: int, temperature: float) -> dict[str, Any]:
    return {
        "inputs": prompt,
        "parameters": {"max_new_tokens": max_new_tokens, "temperature": temperature},
    }


def _decode(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class HuggingFaceClient:
    """Token-authenticated inference endpoint: ``POST {base}/{model}``."""

    provider = HUGGINGFACE

    def __init__(self, config: GenerationConfig, http: httpx.AsyncClient) -> None:
        self.config = config
        self.http = http

    async def call(self, model: str, payload: dict[str, Any]) -> Any:
        token = self.config.hf_api_key
        if not token:
            raise ConfigurationError(self.provider, "HF_API_KEY not configured")

        url = f"{self.config.hf_api_base}/{model}"
        logger.debug("requesting %s", model, extra={"provider": self.provider, "model": model})
        try:
            response = await self.http.post(
                url,
                json=payload,
                headers={
                    "Authorization": f"Bearer {token}",
                    "Content-Type": "application/json",
                },
                timeout=self.config.timeout_seconds,
            )
        except httpx.HTTPError as e:
            raise ProviderError(
                provider=self.provider,
                model=model,
                status=None,
                status_text=type(e).__name__,
                body=str(e),
            ) from e

        if not response.is_success:
            # model is part of the error so 404s stay traceable through fallbacks
            raise ProviderError(
                provider=self.provider,
                model=model,
                status=response.status_code,
                status_text=response.reason_phrase,
                body=response.text,
            )
        return _decode(response)


def _first_content(items: Any) -> Any:
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0].get("content")
    return None


def extract_gemini_text(data: Any) -> str:
    """Pull generated text out of a ``generateText`` response.

    Always a string: structured ``content`` (e.g. ``{"parts": [...]}``) is
    serialized rather than passed on.
    """
    if isinstance(data, dict):
        for key in ("candidates", "output"):
            content = _first_content(data.get(key))
            if content:
                return content if isinstance(content, str) else to_json(content)
    return to_json(data)


class GeminiClient:
    """Key-in-query endpoint: ``POST {base}/{model}:generateText?key=...``."""

    provider = GEMINI

    def __init__(self, config: GenerationConfig, http: httpx.AsyncClient) -> None:
        self.config = config
        self.http = http

    async def call(self, model: str, payload: dict[str, Any]) -> Any:
        key = self.config.gemini_api_key
        if not key:
            raise ConfigurationError(self.provider, "GEMINI_API_KEY not configured")

        url = f"{self.config.gemini_api_base}/{model}:generateText"
        logger.debug("requesting %s", model, extra={"provider": self.provider, "model": model})
        try:
            response = await self.http.post(
                url,
                params={"key": key},
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.config.timeout_seconds,
            )
        except httpx.HTTPError as e:
            # str(e) may carry the request url, which holds the key
            raise ProviderError(
                provider=self.provider,
                model=model,
                status=None,
                status_text=type(e).__name__,
            ) from e

        if not response.is_success:
            raise ProviderError(
                provider=self.provider,
                model=model,
                status=response.status_code,
                status_text=response.reason_phrase,
                body=response.text,
            )
        try:
            return response.json()
        except ValueError:
            return None

    async def generate_text(
        self,
        prompt: str,
        *,
        model: Optional[str] = None,
        max_output_tokens: int = 600,
        temperature: float = 0.7,
    ) -> str:
        payload = {
            "prompt": {"text": prompt},
            "temperature": temperature,
            "maxOutputTokens": max_output_tokens,
        }
        data = await self.call(model or self.config.gemini_model, payload)
        return extract_gemini_text(data)
