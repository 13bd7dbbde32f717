"""
Pydantic schemas for token issue and self-registration.
"""

from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional

from app.schemas.base import StrictCamelModel


class TokenUser(BaseModel):
    """Caller identity decoded from a token."""
    username: str
    is_admin: bool = False


class TokenRequest(StrictCamelModel):
    """Request schema for POST /auth/token."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=1, max_length=72)


class RegisterRequest(StrictCamelModel):
    """Request schema for self-registration; never creates an admin."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=5, max_length=72)
    first_name: str = Field(..., min_length=1, max_length=30)
    last_name: str = Field(..., min_length=1, max_length=30)
    email: EmailStr
    technology: Optional[List[str]] = None


class TokenResponse(BaseModel):
    """JWT token response."""
    token: str
