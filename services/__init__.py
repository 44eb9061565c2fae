from .auth import AuthService
from .users import UserService
from .tokens import TokenService
from .conversations import ConversationService
from .coze import CozeClient

__all__ = ["AuthService", "UserService", "TokenService", "ConversationService", "CozeClient"]
