from fastapi import APIRouter, Depends

from app.apis.deps import require_user
from app.core.db.schemas.auth import User
from app.modules.auth import total_days
from .schemas import (
    MeResponse,
    PreferencesResponse,
    PreferencesUpdate,
    ProgressSummary,
    UserDetail,
)


router = APIRouter(prefix="/api/user", tags=["user"])


@router.get("/me", response_model=MeResponse)
async def get_me(current_user: User = Depends(require_user)) -> MeResponse:
    """Current user's account details and progress counters"""
    return MeResponse(
        user=UserDetail(
            id=current_user.id,
            name=current_user.name,
            email=str(current_user.email),
            role=current_user.role.value,
            consecutive_days=current_user.consecutive_days or 0,
            started_at=current_user.started_at,
            last_active_at=current_user.last_active_at,
        ),
        progress_summary=ProgressSummary(
            total_days=total_days(current_user.started_at),
            consecutive_days=current_user.consecutive_days or 0,
        ),
    )


@router.put("/preferences", response_model=PreferencesResponse)
async def update_preferences(
    body: PreferencesUpdate,
    current_user: User = Depends(require_user),
) -> PreferencesResponse:
    return PreferencesResponse()
