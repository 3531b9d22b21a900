from app.core.db.schemas.auth import User
from .users import (
    UserCreate,
    UserRead,
    UserUpdate,
    UserManager,
    get_user_db,
    get_user_manager,
    get_database_strategy,
    auth_backend,
    fastapi_users,
    oauth_clients,
    set_session_cookie,
    clear_session_cookie,
)
from .activity import next_streak, record_activity, total_days

__all__ = [
    "User",
    "UserCreate",
    "UserRead",
    "UserUpdate",
    "UserManager",
    "get_user_db",
    "get_user_manager",
    "get_database_strategy",
    "auth_backend",
    "fastapi_users",
    "oauth_clients",
    "set_session_cookie",
    "clear_session_cookie",
    "next_streak",
    "record_activity",
    "total_days",
]
