from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.encoders import jsonable_encoder

from app.apis.deps import get_learning_tools
from app.core.logging import get_logger
from app.modules.documents.extract import UnsupportedFileType, extract_text
from app.modules.generation import (
    GenerationError,
    InvalidInputError,
    LearningToolsService,
)
from app.modules.generation.service import DEFAULT_FLASHCARD_COUNT, DEFAULT_QUIZ_COUNT
from .schemas import (
    AnswerResponse,
    CountedTextRequest,
    FlashcardsResponse,
    QARequest,
    QuizResponse,
    StatusResponse,
    SummaryResponse,
    TextRequest,
    UploadResponse,
)


logger = get_logger(__name__)

router = APIRouter(prefix="/api/ml", tags=["ml"])


def _bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def _failed(task: str, err: Exception) -> HTTPException:
    logger.error("%s error: %s", task, err)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"{task} failed"
    )


def _require_text(text: Optional[str]) -> str:
    if not text:
        raise _bad_request("text required")
    return text


@router.get("/status", response_model=StatusResponse)
async def provider_status(
    tools: LearningToolsService = Depends(get_learning_tools),
) -> StatusResponse:
    return StatusResponse(
        hf_configured=tools.config.hf_enabled,
        gemini_configured=tools.config.gemini_enabled,
    )


@router.post("/summarize", response_model=SummaryResponse)
async def summarize(
    req: TextRequest,
    tools: LearningToolsService = Depends(get_learning_tools),
) -> SummaryResponse:
    text = _require_text(req.text)
    try:
        summary = await tools.summarize(text)
    except InvalidInputError as e:
        raise _bad_request(str(e)) from e
    except GenerationError as e:
        raise _failed("summarization", e) from e
    return SummaryResponse(summary=summary)


@router.post("/quiz", response_model=QuizResponse)
async def quiz(
    req: CountedTextRequest,
    tools: LearningToolsService = Depends(get_learning_tools),
) -> QuizResponse:
    text = _require_text(req.text)
    try:
        out = await tools.generate_quiz(text, req.count or DEFAULT_QUIZ_COUNT)
    except InvalidInputError as e:
        raise _bad_request(str(e)) from e
    except GenerationError as e:
        raise _failed("quiz generation", e) from e
    return QuizResponse(quiz=jsonable_encoder(out, by_alias=True))


@router.post("/flashcards", response_model=FlashcardsResponse)
async def flashcards(
    req: CountedTextRequest,
    tools: LearningToolsService = Depends(get_learning_tools),
) -> FlashcardsResponse:
    text = _require_text(req.text)
    try:
        out = await tools.generate_flashcards(text, req.count or DEFAULT_FLASHCARD_COUNT)
    except InvalidInputError as e:
        raise _bad_request(str(e)) from e
    except GenerationError as e:
        raise _failed("flashcard generation", e) from e
    return FlashcardsResponse(flashcards=jsonable_encoder(out, by_alias=True))


@router.post("/qa", response_model=AnswerResponse)
async def qa(
    req: QARequest,
    tools: LearningToolsService = Depends(get_learning_tools),
) -> AnswerResponse:
    if not req.text or not req.question:
        raise _bad_request("text and question required")
    try:
        answer = await tools.answer(req.text, req.question)
    except InvalidInputError as e:
        raise _bad_request(str(e)) from e
    except GenerationError as e:
        raise _failed("Q&A", e) from e
    return AnswerResponse(answer=answer)


@router.post("/upload", response_model=UploadResponse)
async def upload(file: Optional[UploadFile] = File(None)) -> UploadResponse:
    """Extract plain text from a .txt, .pdf or .docx upload."""
    if file is None:
        raise _bad_request("No file uploaded")
    data = await file.read()
    try:
        content = extract_text(file.filename or "", data)
    except UnsupportedFileType as e:
        raise _bad_request(str(e)) from e
    except Exception as e:
        raise _failed("File processing", e) from e
    return UploadResponse(content=content)
