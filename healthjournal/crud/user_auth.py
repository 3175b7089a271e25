# crud/user_auth.py
from typing import Optional
from uuid import UUID
from datetime import datetime, timezone
from sqlalchemy.orm import Session
from passlib.context import CryptContext

from healthjournal.models.user_auth import UserAuth

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class UserAuthCRUD:
    """CRUD operations for UserAuth model."""

    # =====================================================================
    # HELPER METHODS
    # =====================================================================

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password."""
        return pwd_context.hash(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash."""
        return pwd_context.verify(plain_password, hashed_password)

    # =====================================================================
    # CREATE / READ / UPDATE
    # =====================================================================

    def create(
        self, db: Session, *, email: str, password: str, username: Optional[str] = None
    ) -> UserAuth:
        """Create a new user with a hashed password."""
        user = UserAuth(
            email=email.lower(),
            username=username,
            password_hash=self.hash_password(password),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    def get(self, db: Session, *, id: UUID) -> Optional[UserAuth]:
        """Get user by ID."""
        return db.query(UserAuth).filter(UserAuth.id == id).first()

    def get_by_email(self, db: Session, *, email: str) -> Optional[UserAuth]:
        """Get user by email (case-insensitive)."""
        return db.query(UserAuth).filter(UserAuth.email == email.lower()).first()

    def mark_login(self, db: Session, user: UserAuth) -> None:
        """Record a successful login."""
        user.last_login_at = datetime.now(timezone.utc)
        db.commit()


crud_user_auth = UserAuthCRUD()
