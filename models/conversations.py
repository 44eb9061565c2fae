"""Conversation model linking users to provider conversations."""
from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Conversation(Base):
    """
    SQLAlchemy model for conversations.

    Each row records that a user owns a conversation created on the Coze
    side. The conversation id is issued by Coze; messages live there too.
    """
    __tablename__ = "conversations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    conversation_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False, default="")
