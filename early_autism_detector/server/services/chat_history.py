"""
Chat history service.

Persists assistant exchanges and renders the per-day conversation view.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from early_autism_detector.core.database.entities.chat_history import ChatHistory
from early_autism_detector.core.database.repositories import ChatHistoryRepository
from early_autism_detector.core.logging_config import get_logger
from early_autism_detector.core.models.io.chat import HistoryGroup, HistoryMessage, MessageRole

logger = get_logger(__name__)

HISTORY_LIMIT = 100


def group_history(rows: List[ChatHistory]) -> List[HistoryGroup]:
    """
    Group exchanges by calendar day.

    Each exchange becomes a user message followed by an assistant message
    (``{id}-response``). Days are ordered newest first and messages within a
    day oldest first.
    """
    days: "OrderedDict[str, List[ChatHistory]]" = OrderedDict()
    for row in sorted(rows, key=lambda item: item.timestamp, reverse=True):
        days.setdefault(row.timestamp.date().isoformat(), []).append(row)

    groups = []
    for day, day_rows in days.items():
        messages = []
        for row in sorted(day_rows, key=lambda item: item.timestamp):
            timestamp = row.timestamp.isoformat()
            messages.append(HistoryMessage(id=row.id, role=MessageRole.USER, content=row.question, timestamp=timestamp))
            messages.append(
                HistoryMessage(
                    id=f"{row.id}-response", role=MessageRole.ASSISTANT, content=row.answer, timestamp=timestamp
                )
            )
        groups.append(HistoryGroup(date=day, messages=messages))
    return groups


class ChatHistoryService:
    """Service for chat history over an AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repository = ChatHistoryRepository(session)

    async def save_exchange(self, user_id: str, question: str, answer: str) -> bool:
        """Persist an exchange; failures are logged and reported as False."""
        try:
            await self.repository.create(ChatHistory(user_id=user_id, question=question, answer=answer))
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Failed to save chat history for user {user_id}: {e}", exc_info=True)
            return False
        return True

    async def grouped(self, user_id: str) -> List[HistoryGroup]:
        rows = await self.repository.recent_for_user(user_id, limit=HISTORY_LIMIT)
        return group_history(rows)

    async def clear(self, user_id: str) -> int:
        removed = await self.repository.clear_for_user(user_id)
        logger.info(f"Cleared {removed} chat history entries for user {user_id}")
        return removed
