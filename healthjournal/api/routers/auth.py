# healthjournal/api/routers/auth.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from healthjournal.core.config import get_db
from healthjournal.core.security import (
    create_access_token,
    create_refresh_token,
    get_current_user,
    verify_refresh_token,
    load_active_user,
)
from healthjournal.services.user_auth import user_auth_service
from healthjournal.models.user_auth import UserAuth
from healthjournal.schemas.user_auth import (
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
    UserAuthOut,
)

router = APIRouter(prefix="/auth", tags=["User Authentication"])


def _token_response(user: UserAuth) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(data={"sub": str(user.id)}),
        refresh_token=create_refresh_token(data={"sub": str(user.id)}),
        user=UserAuthOut.model_validate(user),
    )


# =====================================================================
# PUBLIC ENDPOINTS - No authentication required
# =====================================================================

@router.post(
    "/register",
    response_model=UserAuthOut,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user account"
)
def register(user_data: RegisterRequest, db: Session = Depends(get_db)):
    """
    Register a new user account.

    - **email**: Valid email address (required)
    - **password**: 8 to 72 characters (required)
    - **username**: Optional username
    """
    return user_auth_service.register_user(
        db=db,
        email=user_data.email,
        password=user_data.password,
        username=user_data.username,
    )


@router.post("/login", response_model=TokenResponse, summary="Login to get access token")
def login(login_data: LoginRequest, db: Session = Depends(get_db)):
    """
    Authenticate and receive access and refresh tokens.

    Follow a successful login with `POST /journal/migrate` to move entries
    written while signed out into the account.
    """
    user = user_auth_service.authenticate_user(db, login_data)
    return _token_response(user)


@router.post("/refresh", response_model=TokenResponse, summary="Refresh access token")
def refresh(token_data: RefreshTokenRequest, db: Session = Depends(get_db)):
    user_id = verify_refresh_token(token_data.refresh_token)
    return _token_response(load_active_user(db, user_id))


# =====================================================================
# AUTHENTICATED ENDPOINTS
# =====================================================================

@router.get("/me", response_model=UserAuthOut, summary="Current user")
def me(current_user: UserAuth = Depends(get_current_user)):
    return current_user
