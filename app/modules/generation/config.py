"""Immutable configuration handed to the generation clients and service."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.core.config import Settings

DEFAULT_SUMMARY_MODEL = "facebook/bart-large-cnn"
DEFAULT_SUMMARY_FALLBACK = "google/flan-t5-large"
DEFAULT_QA_MODEL = "deepset/roberta-base-squad2"

# Models that are generally served by the inference API; others commonly 404.
INSTRUCT_DEFAULTS: tuple[str, ...] = (
    "google/flan-t5-large",
    "sshleifer/distilbart-cnn-12-6",
    "facebook/bart-large-cnn",
)


def _first(*values: Optional[str]) -> Optional[str]:
    for v in values:
        if v and v.strip():
            return v.strip()
    return None


class GenerationConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    hf_api_key: Optional[str] = None
    hf_api_base: str = "https://api-inference.huggingface.co/models"
    summary_model: str = DEFAULT_SUMMARY_MODEL
    summary_fallback: str = DEFAULT_SUMMARY_FALLBACK
    instruct_model: Optional[str] = None
    instruct_defaults: tuple[str, ...] = INSTRUCT_DEFAULTS
    qa_model: str = DEFAULT_QA_MODEL

    gemini_api_key: Optional[str] = None
    gemini_api_base: str = "https://generativelanguage.googleapis.com/v1beta2/models"
    gemini_model: str = "gemini-1.5-flash"

    timeout_seconds: float = 60.0

    @property
    def hf_enabled(self) -> bool:
        return bool(self.hf_api_key)

    @property
    def gemini_enabled(self) -> bool:
        return bool(self.gemini_api_key)

    @classmethod
    def from_settings(cls, settings: Settings) -> "GenerationConfig":
        hf = settings.huggingface
        gm = settings.gemini
        return cls(
            hf_api_key=_first(hf.api_key),
            hf_api_base=hf.api_base.rstrip("/"),
            summary_model=_first(hf.summary_model, hf.model) or DEFAULT_SUMMARY_MODEL,
            summary_fallback=_first(hf.summary_fallback) or DEFAULT_SUMMARY_FALLBACK,
            instruct_model=_first(hf.instruct_model, hf.model),
            qa_model=_first(hf.qa_model) or DEFAULT_QA_MODEL,
            gemini_api_key=_first(gm.api_key),
            gemini_api_base=gm.api_base.rstrip("/"),
            gemini_model=_first(gm.model) or "gemini-1.5-flash",
            timeout_seconds=settings.provider_timeout_seconds,
        )
