"""Conversation store: persistence of user-to-conversation links."""
from typing import List, Optional
import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from exceptions import StoreError
from models.conversations import Conversation

logger = logging.getLogger(__name__)


class ConversationService:
    """Service class for conversation CRUD operations."""

    @staticmethod
    def create_conversation(db: Session, user_id: int, conversation_id: str, name: str = "") -> Conversation:
        """Record that ``user_id`` owns the Coze conversation ``conversation_id``."""
        db_conversation = Conversation(
            user_id=user_id,
            conversation_id=conversation_id,
            name=name or ""
        )

        db.add(db_conversation)
        try:
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to save conversation {conversation_id} for user {user_id}: {e}")
            raise StoreError("Failed to save conversation to database", code=50002) from e
        db.refresh(db_conversation)

        return db_conversation

    @staticmethod
    def get_user_conversations(db: Session, user_id: int) -> List[Conversation]:
        """Retrieve all conversations for a specific user."""
        try:
            return db.query(Conversation).filter(Conversation.user_id == user_id).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to list conversations for user {user_id}: {e}")
            raise StoreError("Failed to retrieve conversations from database", code=50003) from e

    @staticmethod
    def get_conversation(db: Session, conversation_id: str) -> Optional[Conversation]:
        """Retrieve a conversation by its Coze conversation id."""
        try:
            return db.query(Conversation).filter(Conversation.conversation_id == conversation_id).first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up conversation {conversation_id}: {e}")
            raise StoreError(code=50003) from e
