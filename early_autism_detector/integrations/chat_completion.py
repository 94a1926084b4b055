"""
Chat completion for the assistant.

The assistant runs on OpenAI-compatible chat models through pydantic-ai.
DeepSeek is the primary provider and OpenAI the alternative; when both are
configured the secondary one is used as a fallback.
"""

from __future__ import annotations

import time
from typing import List, Optional, Protocol, Sequence, Tuple

from pydantic_ai import Agent, ModelSettings
from pydantic_ai.messages import ModelMessage, ModelRequest, ModelResponse, TextPart, UserPromptPart
from pydantic_ai.models import Model
from pydantic_ai.models.fallback import FallbackModel
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider

from early_autism_detector.core.logging_config import get_logger
from early_autism_detector.core.monitoring import log_chat_completion

logger = get_logger(__name__)

SYSTEM_PROMPT = """You are a helpful AI assistant. You can answer questions on a wide variety of topics including:

- General knowledge and information
- Health and medical topics (noting when professional consultation is needed)
- Technology and science
- Education and learning
- Autism and developmental topics
- Parenting and child development

Provide accurate, helpful, and well-structured responses. When discussing medical or health topics, \
always remind users to consult with healthcare professionals for personalized advice. \
Be empathetic, supportive, and maintain a professional tone."""

FALLBACK_REPLY = "I apologize, but I couldn't generate a response."

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1000


class ChatCompletionError(Exception):
    """Raised when no chat model is available or the provider call fails."""


class ChatTurn(Protocol):
    role: str
    content: str


def _role(turn: ChatTurn) -> str:
    return getattr(turn.role, "value", turn.role)


def build_chat_model(
    provider: str,
    deepseek_api_key: Optional[str],
    deepseek_model: str,
    deepseek_base_url: str,
    openai_api_key: Optional[str],
    openai_model: str,
    openai_base_url: Optional[str] = None,
) -> Model:
    """
    Build the chat model for the configured providers.

    Args:
        provider: Preferred provider, ``deepseek`` or ``openai``
        deepseek_api_key: DeepSeek key (provider skipped when empty)
        deepseek_model: DeepSeek model name
        deepseek_base_url: DeepSeek OpenAI-compatible endpoint
        openai_api_key: OpenAI key (provider skipped when empty)
        openai_model: OpenAI model name
        openai_base_url: Optional OpenAI endpoint override

    Returns:
        A single model, or a FallbackModel when both providers are configured

    Raises:
        ChatCompletionError: If no provider has an API key
    """
    models = {}
    if deepseek_api_key:
        models["deepseek"] = OpenAIChatModel(
            deepseek_model, provider=OpenAIProvider(base_url=deepseek_base_url, api_key=deepseek_api_key)
        )
    if openai_api_key:
        models["openai"] = OpenAIChatModel(
            openai_model, provider=OpenAIProvider(base_url=openai_base_url or None, api_key=openai_api_key)
        )
    if not models:
        raise ChatCompletionError("No chat completion provider is configured")

    ordered = sorted(models.items(), key=lambda item: item[0] != provider)
    logger.debug(f"Chat providers in order: {[name for name, _ in ordered]}")
    if len(ordered) == 1:
        return ordered[0][1]
    return FallbackModel(ordered[0][1], *(model for _, model in ordered[1:]))


def split_conversation(messages: Sequence[ChatTurn]) -> Tuple[str, List[ModelMessage]]:
    """
    Split a client conversation into the prompt and the prior history.

    System turns sent by the client are dropped; the last remaining turn is the prompt.

    Raises:
        ChatCompletionError: If no user or assistant turn remains
    """
    turns = [turn for turn in messages if _role(turn) in ("user", "assistant")]
    if not turns:
        raise ChatCompletionError("Conversation has no user message")

    history: List[ModelMessage] = []
    for turn in turns[:-1]:
        if _role(turn) == "user":
            history.append(ModelRequest(parts=[UserPromptPart(content=turn.content)]))
        else:
            history.append(ModelResponse(parts=[TextPart(content=turn.content)]))
    return turns[-1].content, history


class ChatAssistant:
    """General-purpose assistant that answers the last turn of a conversation."""

    def __init__(
        self,
        model: Model,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        self.model = model
        self.agent = Agent(
            model,
            instructions=SYSTEM_PROMPT,
            model_settings=ModelSettings(temperature=temperature, max_tokens=max_tokens),
        )

    async def reply(self, messages: Sequence[ChatTurn]) -> str:
        """
        Generate the assistant's reply to ``messages``.

        Returns:
            Reply text, or a fixed apology when the model returns nothing

        Raises:
            ChatCompletionError: If the provider call fails
        """
        prompt, history = split_conversation(messages)
        model_name = getattr(self.model, "model_name", "unknown")
        start_time = time.time()
        try:
            result = await self.agent.run(prompt, message_history=history or None)
        except Exception as e:
            log_chat_completion("chat", model_name, (time.time() - start_time) * 1000, succeeded=False)
            logger.error(f"Chat completion failed: {e}", exc_info=True)
            raise ChatCompletionError(f"Chat completion failed: {e}") from e

        log_chat_completion("chat", model_name, (time.time() - start_time) * 1000, succeeded=True)
        output = (result.output or "").strip()
        return output or FALLBACK_REPLY
