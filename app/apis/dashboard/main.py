from fastapi import APIRouter, Depends

from app.apis.deps import require_user
from app.core.db.schemas.auth import User
from app.modules.auth import UserManager, get_user_manager, record_activity, total_days
from .schemas import DashboardResponse, ProgressData


router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
@router.get("/", response_model=DashboardResponse, include_in_schema=False)
async def get_dashboard(
    current_user: User = Depends(require_user),
    user_manager: UserManager = Depends(get_user_manager),
) -> DashboardResponse:
    """Visiting the dashboard counts as the day's activity for the streak."""
    user = await record_activity(user_manager, current_user)
    streak = user.consecutive_days or 0
    return DashboardResponse(
        progress_data=ProgressData(
            consecutive_days=streak,
            total_days=total_days(user.started_at),
        ),
        consecutive_days=streak,
    )
