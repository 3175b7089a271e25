# services/user_auth.py
from typing import Optional
from sqlalchemy.orm import Session

from healthjournal.core.exceptions import ConflictError, UnauthorizedError
from healthjournal.crud.user_auth import crud_user_auth
from healthjournal.models.user_auth import UserAuth, Status
from healthjournal.schemas.user_auth import LoginRequest


class UserAuthService:
    """Account registration and credential checks."""

    def __init__(self):
        self.crud = crud_user_auth

    def register_user(
        self,
        db: Session,
        email: str,
        password: str,
        username: Optional[str] = None,
    ) -> UserAuth:
        """
        Public user registration.

        Raises:
            ConflictError: If the email is already registered
        """
        if self.crud.get_by_email(db, email=email):
            raise ConflictError("Email already registered")
        return self.crud.create(db, email=email, password=password, username=username)

    def authenticate_user(self, db: Session, login_data: LoginRequest) -> UserAuth:
        """
        Authenticate user with email and password.

        Raises:
            UnauthorizedError: If credentials are invalid or the account is not active
        """
        user = self.crud.get_by_email(db, email=login_data.email)
        if not user or not self.crud.verify_password(login_data.password, user.password_hash):
            raise UnauthorizedError("Invalid email or password")

        if user.status != Status.active:
            raise UnauthorizedError(f"Account is {user.status.value}")

        self.crud.mark_login(db, user)
        return user


user_auth_service = UserAuthService()
