from typing import Any, Optional

from pydantic import BaseModel

from app.apis.auth.schemas import CamelModel


class TextRequest(BaseModel):
    text: Optional[str] = None


class CountedTextRequest(TextRequest):
    count: Optional[int] = None


class QARequest(TextRequest):
    question: Optional[str] = None


class StatusResponse(CamelModel):
    hf_configured: bool
    gemini_configured: bool


class SummaryResponse(BaseModel):
    summary: str


class QuizResponse(BaseModel):
    # parsed question list, or the model's raw text when nothing parsed
    quiz: Any


class FlashcardsResponse(BaseModel):
    flashcards: Any


class AnswerResponse(BaseModel):
    answer: str


class UploadResponse(BaseModel):
    content: str
