"""Unit tests for the SendGrid mail sender."""

import json

import httpx
import pytest

from early_autism_detector.integrations.email import (
    VERIFICATION_SUBJECT,
    EmailDeliveryError,
    SendGridClient,
    verification_email_html,
)

pytestmark = pytest.mark.asyncio

BASE_URL = "http://mock-sendgrid/v3"


def make_client(handler, api_key="sg-key") -> SendGridClient:
    return SendGridClient(api_key, "noreply@example.com", BASE_URL, transport=httpx.MockTransport(handler))


class TestSendGridClient:
    async def test_send_verification_payload(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(202)

        await make_client(handler).send_verification("parent@example.com", "http://site/verify?token=abc")

        assert seen["path"] == "/v3/mail/send"
        assert seen["auth"] == "Bearer sg-key"
        assert seen["body"]["personalizations"] == [{"to": [{"email": "parent@example.com"}]}]
        assert seen["body"]["from"] == {"email": "noreply@example.com"}
        assert seen["body"]["subject"] == VERIFICATION_SUBJECT
        assert "http://site/verify?token=abc" in seen["body"]["content"][0]["value"]

    async def test_rejected_message_raises(self):
        with pytest.raises(EmailDeliveryError):
            await make_client(lambda request: httpx.Response(401, json={"errors": []})).send("a@b.co", "s", "<p/>")

    async def test_not_configured_raises(self):
        with pytest.raises(EmailDeliveryError):
            await make_client(lambda request: httpx.Response(202), api_key=None).send("a@b.co", "s", "<p/>")


def test_verification_html_contains_link():
    html = verification_email_html("http://site/verify?token=abc")
    assert 'href="http://site/verify?token=abc"' in html
