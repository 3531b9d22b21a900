from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from app.core.db.schemas.auth import User
from app.modules.auth import fastapi_users
from app.modules.generation import LearningToolsService


_optional_user = fastapi_users.current_user(optional=True, active=True)


async def require_user(user: Optional[User] = Depends(_optional_user)) -> User:
    """Resolve the session user; 401 with the message the frontend expects."""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required"
        )
    return user


def get_learning_tools(request: Request) -> LearningToolsService:
    """Service built once per process in the app lifespan."""
    return request.app.state.learning_tools
