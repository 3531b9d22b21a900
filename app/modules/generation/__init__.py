"""Generation module exports."""

from .config import GenerationConfig
from .errors import (
    AllCandidatesExhausted,
    ConfigurationError,
    GenerationError,
    InvalidInputError,
    ProviderError,
)
from .models import FlashcardItem, QuizItem
from .service import LearningToolsService

__all__ = [
    "AllCandidatesExhausted",
    "ConfigurationError",
    "FlashcardItem",
    "GenerationConfig",
    "GenerationError",
    "InvalidInputError",
    "LearningToolsService",
    "ProviderError",
    "QuizItem",
]
