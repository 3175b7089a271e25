# healthjournal/core/security.py
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from healthjournal.core.config import settings, get_db
from healthjournal.crud.user_auth import crud_user_auth
from healthjournal.models.user_auth import UserAuth, Status


# =====================================================================
# JWT TOKEN CONFIGURATION
# =====================================================================

# Journal endpoints work without a token (local tier), so no auto 403
security = HTTPBearer(auto_error=False)


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# =====================================================================
# TOKEN CREATION
# =====================================================================

def _create_token(data: dict, secret_key: str, expires: timedelta, token_type: str) -> str:
    to_encode = data.copy()
    to_encode.update({"exp": datetime.now(timezone.utc) + expires, "type": token_type})
    return jwt.encode(to_encode, secret_key, algorithm=settings.ALGORITHM)


def create_access_token(data: dict) -> str:
    """
    Create JWT access token.

    Args:
        data: Dictionary containing user data (typically {"sub": user_id})
    """
    return _create_token(
        data,
        settings.SECRET_KEY,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        "access",
    )


def create_refresh_token(data: dict) -> str:
    """Create JWT refresh token."""
    return _create_token(
        data,
        settings.REFRESH_SECRET_KEY,
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        "refresh",
    )


# =====================================================================
# TOKEN VERIFICATION
# =====================================================================

def verify_token(token: str, secret_key: str, token_type: str = "access") -> str:
    """
    Verify JWT token and return user_id.

    Raises:
        HTTPException: If token is invalid, expired or of the wrong type
    """
    try:
        payload = jwt.decode(token, secret_key, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise _credentials_exception()

    user_id: Optional[str] = payload.get("sub")
    if user_id is None:
        raise _credentials_exception()
    if payload.get("type") != token_type:
        raise _credentials_exception(f"Invalid token type. Expected {token_type}")
    return user_id


def verify_access_token(token: str) -> str:
    return verify_token(token, settings.SECRET_KEY, "access")


def verify_refresh_token(token: str) -> str:
    return verify_token(token, settings.REFRESH_SECRET_KEY, "refresh")


def load_active_user(db: Session, user_id: str) -> UserAuth:
    try:
        user = crud_user_auth.get(db, id=UUID(user_id))
    except ValueError:
        raise _credentials_exception()
    if user is None:
        raise _credentials_exception("User not found")
    if user.status != Status.active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Account is {user.status.value}",
        )
    return user


# =====================================================================
# USER AUTHENTICATION DEPENDENCIES
# =====================================================================

def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[UserAuth]:
    """
    Current user if a bearer token was sent, otherwise None.

    A token that is sent but invalid is still rejected with 401.
    """
    if credentials is None:
        return None
    return load_active_user(db, verify_access_token(credentials.credentials))


def get_current_user(
    current_user: Optional[UserAuth] = Depends(get_current_user_optional),
) -> UserAuth:
    """Current authenticated user; 401 when no token was sent."""
    if current_user is None:
        raise _credentials_exception("Not authenticated")
    return current_user
