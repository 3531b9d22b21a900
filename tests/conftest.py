from __future__ import annotations

from typing import Any, Optional

import pytest

from app.modules.generation.config import GenerationConfig
from app.modules.generation.errors import ProviderError


class Seq(list):
    """Successive responses for one model, consumed in order."""


class FakeClient:
    """Scripted provider: ``responses`` maps model -> value, exception, or ``Seq``.

    Models without a scripted response answer 404.
    """

    def __init__(self, provider: str, responses: Optional[dict[str, Any]] = None) -> None:
        self.provider = provider
        self.responses = dict(responses or {})
        self.calls: list[tuple[str, Any]] = []

    async def call(self, model: str, payload: Any) -> Any:
        self.calls.append((model, payload))
        out = self.responses.get(model)
        if isinstance(out, Seq):
            out = out.pop(0)
        if out is None:
            raise ProviderError(
                provider=self.provider, model=model, status=404, status_text="Not Found"
            )
        if isinstance(out, Exception):
            raise out
        return out

    @property
    def models(self) -> list[str]:
        return [m for m, _ in self.calls]


class FakeGemini(FakeClient):
    def __init__(self, output: Any) -> None:
        super().__init__("gemini", {})
        self.output = output
        self.prompts: list[str] = []

    async def generate_text(self, prompt: str, **kwargs: Any) -> str:
        self.prompts.append(prompt)
        if isinstance(self.output, Exception):
            raise self.output
        return self.output


@pytest.fixture
def config() -> GenerationConfig:
    return GenerationConfig(hf_api_key="hf-test-key")


@pytest.fixture
def config_with_gemini() -> GenerationConfig:
    return GenerationConfig(hf_api_key="hf-test-key", gemini_api_key="gm-test-key")
