from pydantic import Field

from app.apis.auth.schemas import CamelModel


RECOMMENDATIONS = [
    "Try uploading your first document to get started!",
    "Use the quick paste feature to summarize text instantly",
    "Check out our premium features for advanced AI processing",
]


class ProgressData(CamelModel):
    consecutive_days: int = 0
    total_days: int = 0
    documents_count: int = 0
    flashcards_studied: int = 0
    quizzes_completed: int = 0


class DashboardResponse(CamelModel):
    recent_docs: list[dict] = Field(default_factory=list)
    progress_data: ProgressData
    consecutive_days: int = 0
    recommendations: list[str] = Field(default_factory=lambda: list(RECOMMENDATIONS))
