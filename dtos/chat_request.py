from pydantic import BaseModel, Field


class ConversationCreateRequest(BaseModel):
    bot_id: str = Field(..., min_length=1)
    name: str = Field(default="", max_length=255)


class ChatRequest(BaseModel):
    conversation_id: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
