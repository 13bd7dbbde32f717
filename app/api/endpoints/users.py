"""
User management endpoints.

Admins may act on any user; everyone else only on themselves. Creating
users through this router (rather than /auth/register) is admin only and
may create other admins.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_admin_user, ensure_correct_user_or_admin
from app.core.security import create_user_token
from app.crud import user as user_crud
from app.schemas.auth import TokenUser
from app.schemas.user import (
    UserCreateRequest,
    UserUpdateRequest,
    ApplicationRequest,
    UserEnvelope,
    UserDetailEnvelope,
    UserTokenEnvelope,
    UserListEnvelope,
    ApplicationEnvelope,
)

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=UserTokenEnvelope)
def create_user(
    request: UserCreateRequest,
    db: Session = Depends(get_db),
    admin_user: TokenUser = Depends(get_admin_user)
):
    """
    Add a user and return them with a token for them.

    Admin only; the new user may be an admin.
    """
    new_user = user_crud.register(db, request.model_dump(by_alias=True))
    logger.info(f"Admin {admin_user.username} created user {new_user['username']} (admin: {new_user['isAdmin']})")
    return {"user": new_user, "token": create_user_token(new_user)}


@router.get("/", response_model=UserListEnvelope)
def list_users(
    db: Session = Depends(get_db),
    admin_user: TokenUser = Depends(get_admin_user)
):
    """List all users. Admin only."""
    return {"users": user_crud.find_all(db)}


@router.get("/{username}", response_model=UserDetailEnvelope)
def get_user(
    username: str,
    db: Session = Depends(get_db),
    current_user: TokenUser = Depends(ensure_correct_user_or_admin)
):
    """Retrieve a user with their applications and technologies."""
    return {"user": user_crud.get(db, username)}


@router.patch("/{username}", response_model=UserEnvelope)
def update_user(
    username: str,
    request: UserUpdateRequest,
    db: Session = Depends(get_db),
    current_user: TokenUser = Depends(ensure_correct_user_or_admin)
):
    """
    Partially update a user.

    Only admins may change isAdmin; a non-admin asking for it gets 401.
    """
    data = request.model_dump(by_alias=True, exclude_unset=True)
    if "isAdmin" in data and not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Only admins may change isAdmin",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = user_crud.update(db, username, data)
    logger.info(f"Updated user {username}")
    return {"user": user}


@router.delete("/{username}")
def delete_user(
    username: str,
    db: Session = Depends(get_db),
    current_user: TokenUser = Depends(ensure_correct_user_or_admin)
):
    """Delete a user; their applications and technology links go too."""
    user_crud.remove(db, username)
    logger.info(f"Deleted user {username}")
    return {"deleted": username}


@router.post("/{username}/jobs/{job_id}", response_model=ApplicationEnvelope)
def apply_for_job(
    username: str,
    job_id: int,
    request: Optional[ApplicationRequest] = None,
    db: Session = Depends(get_db),
    current_user: TokenUser = Depends(ensure_correct_user_or_admin)
):
    """
    Record an application by `username` for a job.

    Body: {appState} with appState one of interested, applied, accepted,
    rejected (default applied).
    """
    app_state = request.app_state if request else ApplicationRequest().app_state
    applied = user_crud.apply_for_job(db, username, job_id, app_state)
    logger.info(f"User {username} -> job {job_id}: {app_state}")
    return {"applied": applied}
