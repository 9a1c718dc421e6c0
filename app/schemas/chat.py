from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

from app.models.enums import MessageSender

class ChatRequest(BaseModel):
    question: str = Field(min_length=1)
    conversation_id: Optional[int] = None

class ChatResponse(BaseModel):
    text: str
    conversation_id: int

class ChatMessageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    sender: MessageSender
    content: str
    created_at: Optional[datetime] = None

class ChatHistory(BaseModel):
    conversation_id: int
    messages: List[ChatMessageOut]
