from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from app.apis.auth.schemas import CamelModel


class UserDetail(CamelModel):
    id: int
    name: str
    email: str
    role: str
    consecutive_days: int = 0
    started_at: Optional[datetime] = None
    last_active_at: Optional[datetime] = None


class ProgressSummary(CamelModel):
    total_days: int = 0
    consecutive_days: int = 0
    documents_count: int = 0
    flashcards_studied: int = 0


class MeResponse(CamelModel):
    user: UserDetail
    progress_summary: ProgressSummary


class PreferencesUpdate(BaseModel):
    # accepted and acknowledged; nothing is stored yet
    preferences: dict[str, Any] = Field(default_factory=dict)

    model_config = {"extra": "allow"}


class PreferencesResponse(BaseModel):
    success: bool = True
    message: str = "Preferences updated"
