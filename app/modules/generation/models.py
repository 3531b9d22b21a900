"""Pydantic models for generation requests and structured results.

Quiz and flashcard records accept the key spellings models tend to produce
(``answerIndex``/``correct_index``, ``front``/``back``) and always serialize
with the camelCase names the frontend reads.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class TaskKind(str, Enum):
    SUMMARIZE = "summarize"
    QUIZ = "quiz"
    FLASHCARDS = "flashcards"
    QA = "qa"


class GenerationRequest(BaseModel):
    task: TaskKind
    input_text: str
    count: Optional[int] = Field(default=None, ge=1, le=50)
    temperature: float = 0.0
    max_tokens: int = 700

    @field_validator("input_text")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("input text must not be empty")
        return v


class QuizItem(BaseModel):
    """A single multiple-choice question."""

    model_config = ConfigDict(populate_by_name=True)

    question: str = Field(min_length=1)
    choices: list[str] = Field(
        validation_alias=AliasChoices("choices", "options"),
    )
    answer_index: int = Field(
        validation_alias=AliasChoices("answer_index", "answerIndex", "correct_index"),
        serialization_alias="answerIndex",
    )

    @field_validator("choices")
    @classmethod
    def _four_choices(cls, v: list[str]) -> list[str]:
        if len(v) != 4:
            raise ValueError("a quiz item needs exactly 4 choices")
        return v

    @field_validator("answer_index")
    @classmethod
    def _index_in_range(cls, v: int) -> int:
        if not 0 <= v <= 3:
            raise ValueError("answer index must be between 0 and 3")
        return v


class FlashcardItem(BaseModel):
    """Question/answer card; the back may be blank."""

    model_config = ConfigDict(populate_by_name=True)

    question: str = Field(
        min_length=1, validation_alias=AliasChoices("question", "front")
    )
    answer: str = Field(default="", validation_alias=AliasChoices("answer", "back"))
