"""
FastAPI dependencies for authentication and authorization.

A Bearer token is optional on every request: when present and valid its
claims describe the caller, otherwise the caller is anonymous. The
ensure_* dependencies then decide whether the caller may proceed.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from typing import Optional

from app.core.security import decode_token
from app.schemas.auth import TokenUser

# HTTP Bearer token scheme (Authorization: Bearer <token>)
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str = "Unauthorized") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[TokenUser]:
    """
    Extract the caller from the JWT, if one was sent.

    Returns None for anonymous requests and for tokens that fail to decode;
    it is up to the ensure_* dependencies to reject those.
    """
    if not credentials:
        return None

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        return None

    username = payload.get("sub")
    if username is None:
        return None

    return TokenUser(username=username, is_admin=bool(payload.get("is_admin", False)))


async def ensure_logged_in(
    user: Optional[TokenUser] = Depends(get_current_user),
) -> TokenUser:
    """
    Require a valid token.

    Raises:
        HTTPException 401: If no valid token was supplied
    """
    if user is None:
        raise _unauthorized()
    return user


async def get_admin_user(
    user: TokenUser = Depends(ensure_logged_in),
) -> TokenUser:
    """
    Require a valid token whose claims mark the caller as admin.

    Raises:
        HTTPException 401: If not logged in or not an admin
    """
    if not user.is_admin:
        raise _unauthorized()
    return user


async def ensure_correct_user_or_admin(
    username: str,
    user: Optional[TokenUser] = Depends(get_current_user),
) -> TokenUser:
    """
    Require the caller to be the user named in the path, or an admin.

    Used on /users/{username} routes; `username` is read from the path.

    Raises:
        HTTPException 401: If anonymous, or neither admin nor the same user
    """
    if user is None or not (user.is_admin or user.username == username):
        raise _unauthorized()
    return user
