"""
Pydantic schemas for user management and job applications.
"""

from pydantic import EmailStr, Field
from typing import List, Optional

from app.models.user import AppState
from app.schemas.base import CamelModel, StrictCamelModel


class UserCreateRequest(StrictCamelModel):
    """Request schema for admin-created users (may create admins)."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=5, max_length=72)
    first_name: str = Field(..., min_length=1, max_length=30)
    last_name: str = Field(..., min_length=1, max_length=30)
    email: EmailStr
    is_admin: bool = False
    technology: Optional[List[str]] = None


class UserUpdateRequest(StrictCamelModel):
    """Partial update; username cannot change."""
    password: Optional[str] = Field(None, min_length=5, max_length=72)
    first_name: Optional[str] = Field(None, min_length=1, max_length=30)
    last_name: Optional[str] = Field(None, min_length=1, max_length=30)
    email: Optional[EmailStr] = None
    is_admin: Optional[bool] = None
    technology: Optional[List[str]] = None


class ApplicationRequest(StrictCamelModel):
    # Plain str so an unknown state reaches the model layer and comes back as 400
    app_state: str = AppState.APPLIED.value


class UserApplication(CamelModel):
    job_id: int
    app_state: str


class UserResponse(CamelModel):
    """User profile response (no password)."""
    username: str
    first_name: str
    last_name: str
    email: str
    is_admin: bool


class UserWithTechnologyResponse(UserResponse):
    technology: List[str] = []


class UserDetailResponse(UserWithTechnologyResponse):
    jobs: List[UserApplication] = []


class UserEnvelope(CamelModel):
    user: UserWithTechnologyResponse


class UserDetailEnvelope(CamelModel):
    user: UserDetailResponse


class UserTokenEnvelope(CamelModel):
    user: UserWithTechnologyResponse
    token: str


class UserListEnvelope(CamelModel):
    users: List[UserResponse]


class ApplicationEnvelope(CamelModel):
    applied: int
