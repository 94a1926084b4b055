"""
Chat assistant I/O models.
"""

from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class MessageRole(str, Enum):
    """Role of message sender in conversation."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ChatMessage(BaseModel):
    role: MessageRole
    content: str


class ChatRequest(BaseModel):
    messages: List[ChatMessage] = Field(min_length=1, description="Conversation so far, last message last")


class ChatReply(BaseModel):
    role: MessageRole = MessageRole.ASSISTANT
    content: str


class HistoryMessage(BaseModel):
    id: str
    role: MessageRole
    content: str
    timestamp: str


class HistoryGroup(BaseModel):
    date: str = Field(description="Calendar date (YYYY-MM-DD)")
    messages: List[HistoryMessage]


class ChatHistoryRead(BaseModel):
    history: List[HistoryGroup] = Field(default_factory=list)
