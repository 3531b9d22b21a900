"""Summarize / quiz / flashcards / Q&A built on the provider fallback chain.

Every task walks the same ladder until one step gives a usable result:
JSON parse, line-format parse, a "reformat as JSON" request to the model that
answered, one attempt against Gemini, and finally the raw text. Only the
absence of any working provider is raised to the caller.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import httpx
from pydantic import ValidationError

from app.core.logging import get_logger
from app.modules.generation import prompts
from app.modules.generation.config import GenerationConfig
from app.modules.generation.errors import (
    AllCandidatesExhausted,
    GenerationError,
    InvalidInputError,
)
from app.modules.generation.fallback import (
    Candidate,
    build_candidates,
    try_in_order,
)
from app.modules.generation.models import (
    FlashcardItem,
    GenerationRequest,
    QuizItem,
    TaskKind,
)
from app.modules.generation.normalize import normalize
from app.modules.generation.parsers import (
    as_records,
    loads,
    parse_flashcards,
    parse_quiz,
)
from app.modules.generation.providers import (
    GEMINI,
    HUGGINGFACE,
    GeminiClient,
    HuggingFaceClient,
    ProviderClient,
    text_payload,
)
from app.modules.generation.redact import redact

logger = get_logger(__name__)

SUMMARY_MAX_TOKENS = 200
STRUCTURED_MAX_TOKENS = 700
COERCE_MAX_TOKENS = 600

DEFAULT_QUIZ_COUNT = 5
DEFAULT_FLASHCARD_COUNT = 10

LineParser = Callable[[str], Optional[list[Any]]]


def validate_request(
    task: TaskKind,
    text: Optional[str],
    *,
    count: Optional[int] = None,
    max_tokens: int = STRUCTURED_MAX_TOKENS,
) -> GenerationRequest:
    try:
        return GenerationRequest(
            task=task, input_text=text or "", count=count, max_tokens=max_tokens
        )
    except ValidationError as e:
        raise InvalidInputError(
            "; ".join(err["msg"] for err in e.errors())
        ) from e


class LearningToolsService:
    def __init__(
        self,
        config: GenerationConfig,
        *,
        hf: Optional[ProviderClient] = None,
        gemini: Optional[GeminiClient] = None,
        http: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config
        if (hf is None or gemini is None) and http is None:
            raise ValueError("an http client is required to build provider clients")
        self.hf = hf or HuggingFaceClient(config, http)  # type: ignore[arg-type]
        self.gemini = gemini or GeminiClient(config, http)  # type: ignore[arg-type]

    @property
    def clients(self) -> dict[str, ProviderClient]:
        return {HUGGINGFACE: self.hf, GEMINI: self.gemini}

    # -- summarize -----------------------------------------------------

    async def summarize(self, text: str) -> str:
        validate_request(TaskKind.SUMMARIZE, text, max_tokens=SUMMARY_MAX_TOKENS)
        clean = redact(text)
        instruction = prompts.summary_prompt(clean)

        def payload_for(candidate: Candidate) -> dict[str, Any]:
            inputs = clean if prompts.is_summarization_model(candidate.model) else instruction
            return text_payload(inputs, max_new_tokens=SUMMARY_MAX_TOKENS, temperature=0.0)

        candidates = build_candidates(
            HUGGINGFACE, self.config.summary_model, [self.config.summary_fallback]
        )
        try:
            result = await try_in_order(self.clients, candidates, payload_for)
        except AllCandidatesExhausted as e:
            logger.warning("summary models exhausted: %s", e)
            if not self.config.gemini_enabled:
                raise
            try:
                out = await self.gemini.generate_text(instruction)
            except GenerationError as g_err:
                logger.warning("Gemini fallback failed: %s", g_err)
                raise e from g_err
            return prompts.strip_echoed_prompt(out, instruction)

        used = result.used_model.model
        echoed = None if prompts.is_summarization_model(used) else instruction
        return prompts.strip_echoed_prompt(normalize(result.response), echoed)

    # -- quiz / flashcards --------------------------------------------

    async def generate_quiz(self, text: str, count: int = DEFAULT_QUIZ_COUNT) -> Any:
        validate_request(TaskKind.QUIZ, text, count=count)
        prompt = prompts.quiz_prompt(redact(text), count)
        return await self._structured(prompt, parse_quiz, QuizItem, "quiz")

    async def generate_flashcards(
        self, text: str, count: int = DEFAULT_FLASHCARD_COUNT
    ) -> Any:
        validate_request(TaskKind.FLASHCARDS, text, count=count)
        prompt = prompts.flashcards_prompt(redact(text), count)
        return await self._structured(prompt, parse_flashcards, FlashcardItem, "flashcards")

    async def _structured(
        self,
        prompt: str,
        parse_lines: LineParser,
        record: type[QuizItem] | type[FlashcardItem],
        label: str,
    ) -> Any:
        payload = text_payload(prompt, max_new_tokens=STRUCTURED_MAX_TOKENS, temperature=0.0)
        candidates = build_candidates(
            HUGGINGFACE, self.config.instruct_model, self.config.instruct_defaults
        )

        raw = ""
        exhausted: Optional[AllCandidatesExhausted] = None
        try:
            result = await try_in_order(self.clients, candidates, payload)
        except AllCandidatesExhausted as e:
            logger.warning("%s: all models failed: %s", label, e)
            exhausted = e
        else:
            raw = normalize(result.response)
            resolved = self._resolve(raw, parse_lines, record)
            if resolved is not None:
                return resolved
            resolved = await self._coerce(result.used_model, raw, record)
            if resolved is not None:
                return resolved

        if self.config.gemini_enabled:
            try:
                out = await self.gemini.generate_text(prompt)
            except GenerationError as g_err:
                logger.warning("Gemini fallback failed: %s", g_err)
                if exhausted is not None:
                    raise exhausted from g_err
                return raw
            resolved = self._resolve(out, parse_lines, record)
            return resolved if resolved is not None else out

        if exhausted is not None:
            raise exhausted
        logger.info("%s: returning unstructured model output", label)
        return raw

    @staticmethod
    def _resolve(
        text: str,
        parse_lines: LineParser,
        record: type[QuizItem] | type[FlashcardItem],
    ) -> Any:
        try:
            parsed = loads(text)
        except ValueError:
            parsed = None
        # bare scalars ("42", "true") are valid JSON but not an answer
        if isinstance(parsed, (list, dict)):
            return as_records(parsed, record)
        return parse_lines(text)

    async def _coerce(
        self,
        candidate: Candidate,
        raw: str,
        record: type[QuizItem] | type[FlashcardItem],
    ) -> Any:
        """Ask the model that answered to rewrite its own output as JSON."""
        payload = text_payload(
            prompts.coerce_json_prompt(raw), max_new_tokens=COERCE_MAX_TOKENS, temperature=0.0
        )
        client = self.clients[candidate.provider]
        try:
            coerced = normalize(await client.call(candidate.model, payload))
            parsed = loads(coerced)
        except (GenerationError, ValueError) as e:
            logger.info("JSON coercion via %s failed: %s", candidate, e)
            return None
        if not isinstance(parsed, (list, dict)):
            return None
        return as_records(parsed, record)

    # -- Q&A -----------------------------------------------------------

    async def answer(self, context: str, question: str) -> str:
        validate_request(TaskKind.QA, context)
        if not question or not question.strip():
            raise InvalidInputError("question must not be empty")
        payload = {"inputs": {"question": question, "context": redact(context)}}
        out = await self.hf.call(self.config.qa_model, payload)
        if isinstance(out, dict) and "answer" in out:
            return str(out["answer"])
        if isinstance(out, list) and out and isinstance(out[0], dict) and "answer" in out[0]:
            return str(out[0]["answer"])
        return normalize(out)
