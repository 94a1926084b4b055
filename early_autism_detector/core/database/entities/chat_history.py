"""
Chat history entity.

Each row is one exchange with the assistant: the user's question and the answer.
"""

from __future__ import annotations

from datetime import datetime

from sqlmodel import Field

from ..base import Base, UTCDateTime, new_id, utc_now


class ChatHistory(Base, table=True):
    """Table: chat_history"""

    __tablename__ = "chat_history"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(index=True)
    question: str
    answer: str
    timestamp: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)

    def __repr__(self) -> str:
        return f"ChatHistory(id={self.id}, user_id={self.user_id})"
