from .user_auth import crud_user_auth

__all__ = ["crud_user_auth"]
