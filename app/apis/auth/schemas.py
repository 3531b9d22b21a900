from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Response models serialize with the camelCase keys the frontend uses."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Display name")
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserSummary(CamelModel):
    id: int
    name: str
    email: str
    role: str
    consecutive_days: int = 0


class RegisterResponse(CamelModel):
    success: bool = True
    message: str
    user: UserSummary


class LoginResponse(CamelModel):
    success: bool = True
    user: UserSummary


class MessageResponse(BaseModel):
    success: bool = True
    message: str
