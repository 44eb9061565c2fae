"""User model for authentication."""
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from .conversations import Base


class User(Base):
    """
    SQLAlchemy model for users.

    The unique constraint on email is the authoritative duplicate guard.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)

    conversations = relationship("Conversation", backref="owner", lazy="select")
