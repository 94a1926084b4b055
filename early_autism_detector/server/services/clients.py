"""
Third-party client dependencies.

Each provider builds a client from settings; tests replace them through
``app.dependency_overrides``.
"""

from fastapi import HTTPException, status

from early_autism_detector.core.logging_config import get_logger
from early_autism_detector.integrations.chat_completion import ChatAssistant, ChatCompletionError, build_chat_model
from early_autism_detector.integrations.email import SendGridClient
from early_autism_detector.integrations.geoapify import GeoapifyClient
from early_autism_detector.integrations.supabase_auth import SupabaseAuthClient
from early_autism_detector.server.core.config import settings

logger = get_logger(__name__)

CHAT_FAILED = "Failed to process chat request"


def get_auth_client() -> SupabaseAuthClient:
    supabase = settings.supabase
    return SupabaseAuthClient(supabase.url, supabase.anon_key, supabase.service_role_key)


def get_chat_assistant() -> ChatAssistant:
    """Build the assistant for the configured providers.

    Raises:
        HTTPException: 500 when no provider is configured
    """
    deepseek = settings.deepseek
    openai = settings.openai
    try:
        model = build_chat_model(
            provider=settings.chat_provider,
            deepseek_api_key=deepseek.api_key,
            deepseek_model=deepseek.model,
            deepseek_base_url=deepseek.base_url,
            openai_api_key=openai.api_key,
            openai_model=openai.model,
            openai_base_url=openai.base_url,
        )
    except ChatCompletionError as e:
        logger.error(f"Chat assistant unavailable: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=CHAT_FAILED) from e
    return ChatAssistant(model)


def get_geocoder() -> GeoapifyClient:
    return GeoapifyClient(settings.geoapify.api_key, settings.geoapify.base_url)


def get_mailer() -> SendGridClient:
    sendgrid = settings.sendgrid
    return SendGridClient(sendgrid.api_key, sendgrid.from_email, sendgrid.base_url)
