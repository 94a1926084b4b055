"""
Chat history repository.
"""

from __future__ import annotations

from typing import List

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.chat_history import ChatHistory
from .base import BaseRepository


class ChatHistoryRepository(BaseRepository[ChatHistory]):
    """Repository for chat assistant exchanges."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ChatHistory)

    async def recent_for_user(self, user_id: str, limit: int = 100) -> List[ChatHistory]:
        """Latest exchanges of ``user_id``, newest first."""
        stmt = (
            select(ChatHistory)
            .where(ChatHistory.user_id == user_id)
            .order_by(ChatHistory.timestamp.desc())  # type: ignore
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def clear_for_user(self, user_id: str) -> int:
        result = await self.session.execute(delete(ChatHistory).where(ChatHistory.user_id == user_id))
        await self.session.commit()
        return result.rowcount or 0
