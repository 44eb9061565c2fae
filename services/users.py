"""User store: CRUD over user records."""
from typing import Optional
import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from exceptions import DuplicateError, StoreError
from models.users import User

logger = logging.getLogger(__name__)


class UserService:
    """Service class for user CRUD operations."""

    @staticmethod
    def exists_by_email(db: Session, email: str) -> bool:
        """Cheap pre-insert check; the unique constraint remains the real guard."""
        try:
            return db.query(User.id).filter(User.email == email).first() is not None
        except SQLAlchemyError as e:
            logger.error(f"Failed to check email {email}: {e}")
            raise StoreError() from e

    @staticmethod
    def create_user(db: Session, username: str, email: str, hashed_password: str) -> User:
        """
        Create a new user.

        Raises:
            DuplicateError: the email is already registered (including a
                concurrent registration that won the race)
            StoreError: any other persistence failure
        """
        db_user = User(
            username=username,
            email=email,
            hashed_password=hashed_password
        )

        db.add(db_user)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.info(f"Duplicate registration for {email}: {e.orig}")
            raise DuplicateError() from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to create user {email}: {e}")
            raise StoreError("Failed to create user", code=50002) from e
        db.refresh(db_user)

        return db_user

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        """Get a user by email."""
        try:
            return db.query(User).filter(User.email == email).first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up user {email}: {e}")
            raise StoreError(code=50003) from e

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        """Get a user by ID."""
        try:
            return db.query(User).filter(User.id == user_id).first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up user {user_id}: {e}")
            raise StoreError(code=50003) from e
