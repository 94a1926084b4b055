"""
AI chat assistant endpoints.

Forwards the conversation to the configured chat model, stores each
exchange and serves the per-day history.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from early_autism_detector.core.database import get_session
from early_autism_detector.core.logging_config import get_logger
from early_autism_detector.core.models.io.chat import ChatHistoryRead, ChatReply, ChatRequest
from early_autism_detector.integrations.chat_completion import ChatAssistant, ChatCompletionError
from early_autism_detector.server.services.auth import CurrentUserDep
from early_autism_detector.server.services.chat_history import ChatHistoryService
from early_autism_detector.server.services.clients import CHAT_FAILED, get_chat_assistant

router = APIRouter(tags=["chat"])
logger = get_logger(__name__)


@router.post(
    "",
    response_model=ChatReply,
    summary="Ask the Assistant",
    description="Send the conversation so far and receive the assistant's reply to the last message.",
    responses={
        401: {"description": "Unauthorized"},
        500: {"description": "Failed to process chat request"},
    },
)
async def chat(
    body: ChatRequest,
    user: CurrentUserDep,
    session: AsyncSession = Depends(get_session),
    assistant: ChatAssistant = Depends(get_chat_assistant),
) -> ChatReply:
    """
    Ask the assistant.

    Client-supplied system messages are ignored. The exchange is stored in the
    caller's history; a storage failure does not fail the request.
    """
    try:
        answer = await assistant.reply(body.messages)
    except ChatCompletionError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=CHAT_FAILED) from e

    await ChatHistoryService(session).save_exchange(user.id, body.messages[-1].content, answer)
    return ChatReply(content=answer)


@router.get(
    "/history",
    response_model=ChatHistoryRead,
    summary="Chat History",
    description="The caller's latest 100 exchanges grouped by day, newest day first.",
)
async def chat_history(user: CurrentUserDep, session: AsyncSession = Depends(get_session)) -> ChatHistoryRead:
    return ChatHistoryRead(history=await ChatHistoryService(session).grouped(user.id))


@router.delete(
    "/history",
    summary="Clear Chat History",
    description="Delete all of the caller's stored exchanges.",
)
async def clear_chat_history(user: CurrentUserDep, session: AsyncSession = Depends(get_session)):
    removed = await ChatHistoryService(session).clear(user.id)
    return {"success": True, "deleted": removed}
