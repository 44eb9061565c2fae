"""Authentication service for password hashing, login and ownership checks."""
from typing import Union
import logging
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from exceptions import PasswordHashError, InvalidCredentialsError, NotFoundError
from models.users import User
from services.users import UserService

logger = logging.getLogger(__name__)

# Password hashing with Argon2
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


class AuthService:
    """Service class for authentication operations."""

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password with a fresh random salt embedded in the result."""
        try:
            return pwd_context.hash(password)
        except Exception as e:
            logger.error(f"Password hashing failed: {e}")
            raise PasswordHashError() from e

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash. Unrecognised hashes never match."""
        try:
            return pwd_context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            return False

    @staticmethod
    def authenticate_user(db: Session, email: str, password: str) -> User:
        """
        Authenticate a user by email and password.

        Raises:
            NotFoundError: no user has this email
            InvalidCredentialsError: the password does not match
        """
        user = UserService.get_user_by_email(db, email)
        if not user:
            raise NotFoundError(code=40005)
        if not AuthService.verify_password(password, user.hashed_password):
            logger.info(f"Rejected login for user {user.id}: password mismatch")
            raise InvalidCredentialsError()
        return user

    @staticmethod
    def assert_owner(subject_id: Union[int, str], owner_id: Union[int, str]) -> bool:
        """
        Return True iff both ids identify the same user.

        Both sides are canonicalised to ``int`` first so ``"7"`` and ``7``
        compare equal; anything that is not an integer id never matches.
        """
        try:
            return int(subject_id) == int(owner_id)
        except (TypeError, ValueError):
            return False
