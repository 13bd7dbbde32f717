"""
Authentication endpoints.

- POST /token: Exchange username/password for a JWT
- POST /register: Create a (non-admin) account and receive a JWT
"""

import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import create_user_token
from app.crud import user as user_crud
from app.schemas.auth import TokenRequest, RegisterRequest, TokenResponse

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


@router.post("/token", response_model=TokenResponse)
def login(
    request: TokenRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate and return a JWT carrying the username and admin flag.

    Raises 401 on an unknown username or a wrong password.
    """
    user = user_crud.authenticate(db, request.username, request.password)
    logger.info(f"User logged in: {user['username']}")
    return TokenResponse(token=create_user_token(user))


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=TokenResponse)
def register(
    request: RegisterRequest,
    db: Session = Depends(get_db)
):
    """
    Register a new user account.

    Self-registered users are never admins. Returns a JWT for immediate use.
    """
    data = request.model_dump(by_alias=True, exclude_unset=True)
    data["isAdmin"] = False

    new_user = user_crud.register(db, data)
    logger.info(f"New user registered: {new_user['username']}")

    return TokenResponse(token=create_user_token(new_user))
