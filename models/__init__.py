from .conversations import Conversation, Base
from .users import User

__all__ = ["Conversation", "User", "Base"]
