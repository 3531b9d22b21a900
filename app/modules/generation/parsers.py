"""Best-effort parsers for the line formats shown to models in the prompts.

Both return ``None`` (not ``[]``) when nothing matched, so callers can tell
"this grammar does not apply" apart from an empty result.
"""

from __future__ import annotations

import json
import re
from typing import Any, Optional

from pydantic import ValidationError

from app.modules.generation.models import FlashcardItem, QuizItem

_QUESTION_RE = re.compile(r"^Q:\s*", re.IGNORECASE)
_CHOICE_RE = re.compile(r"^([A-D])\)\s*(.*)$", re.IGNORECASE)
_ANSWER_RE = re.compile(r"^Answer:\s*([A-D])(?:[).:\s]|$)", re.IGNORECASE)

_FRONT_RE = re.compile(r"^Front:\s*", re.IGNORECASE)
_BACK_RE = re.compile(r"^Back:\s*", re.IGNORECASE)

LETTERS = "ABCD"


def _lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def parse_quiz(text: str) -> Optional[list[QuizItem]]:
    if not text:
        return None
    lines = _lines(text)
    items: list[QuizItem] = []
    i = 0
    while i < len(lines):
        if not _QUESTION_RE.match(lines[i]):
            i += 1
            continue
        question = _QUESTION_RE.sub("", lines[i], count=1).strip()
        i += 1

        choices: list[str] = []
        while i < len(lines) and len(choices) < 4:
            m = _CHOICE_RE.match(lines[i])
            if not m:
                break
            choices.append(m.group(2).strip())
            i += 1

        answer_index = -1
        if i < len(lines):
            m = _ANSWER_RE.match(lines[i])
            if m:
                answer_index = LETTERS.index(m.group(1).upper())
                i += 1
            elif lines[i].lower().startswith("answer:"):
                i += 1

        if question and len(choices) == 4 and answer_index >= 0:
            items.append(
                QuizItem(question=question, choices=choices, answer_index=answer_index)
            )
    return items or None


def parse_flashcards(text: str) -> Optional[list[FlashcardItem]]:
    if not text:
        return None
    lines = _lines(text)
    items: list[FlashcardItem] = []
    i = 0
    while i < len(lines):
        if not _FRONT_RE.match(lines[i]):
            # "Flashcard N" headers and stray lines
            i += 1
            continue
        front = _FRONT_RE.sub("", lines[i], count=1).strip()
        i += 1
        back = ""
        if i < len(lines) and _BACK_RE.match(lines[i]):
            back = _BACK_RE.sub("", lines[i], count=1).strip()
            i += 1
        if front:
            items.append(FlashcardItem(question=front, answer=back))
    return items or None


def loads(text: str) -> Any:
    """Strict JSON parse; raises ``ValueError`` when ``text`` is not JSON."""
    return json.loads(text)


def as_records(value: Any, model: type[QuizItem] | type[FlashcardItem]) -> Any:
    """Validate a parsed JSON list into records, or hand it back unchanged."""
    if not isinstance(value, list) or not value:
        return value
    if not all(isinstance(v, dict) for v in value):
        return value
    try:
        return [model.model_validate(v) for v in value]
    except ValidationError:
        return value
