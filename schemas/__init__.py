from .common import Report, SUCCESS_CODE
from .auth import UserCreate, UserLogin, UserResponse, LoginResponse, TokenClaims
from .coze import (
    ConversationResponse, ConversationCreateResponse, ConversationListResponse,
    ChatCreateResponse, ChatStatusResponse, Message, MessageListResponse
)

__all__ = ["Report", "SUCCESS_CODE",
           "UserCreate", "UserLogin", "UserResponse", "LoginResponse", "TokenClaims",
           "ConversationResponse", "ConversationCreateResponse", "ConversationListResponse",
           "ChatCreateResponse", "ChatStatusResponse", "Message", "MessageListResponse"]
