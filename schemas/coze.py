"""Schemas for the Coze proxy endpoints and the provider's envelopes."""
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class ConversationResponse(BaseModel):
    """Schema for a stored conversation."""
    id: int
    user_id: int
    conversation_id: str
    name: str = Field(serialization_alias="title")

    model_config = ConfigDict(from_attributes=True)


class ConversationCreateResponse(BaseModel):
    conversation_id: str


class ConversationListResponse(BaseModel):
    conversations: List[ConversationResponse]


class ChatCreateResponse(BaseModel):
    chat_id: str
    status: str


class ChatStatusResponse(BaseModel):
    status: str


class Message(BaseModel):
    """A single chat message as relayed from Coze."""
    content: str = ""
    role: str = ""
    type: str = ""


class MessageListResponse(BaseModel):
    messages: List[Message]


class CozeEnvelope(BaseModel):
    """
    Envelope every Coze response is wrapped in.

    ``code`` 0 means success; anything else is a provider failure described
    by ``msg``.
    """
    code: int
    msg: str = ""
    data: Optional[Any] = None


class CozeConversationData(BaseModel):
    id: str


class CozeChatData(BaseModel):
    id: str = ""
    conversation_id: Optional[str] = None
    status: str = ""
