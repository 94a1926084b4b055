"""
Suite-wide fixtures.

Environment defaults come from ``test/.env`` (if present) and then
``test/.env.example``. Every test runs with outbound HTTP disabled: only mock
hosts, loopback and in-process ASGI requests get through, so Supabase and the
chat providers are never reached for real.
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
from dotenv import load_dotenv

TEST_ROOT = Path(__file__).resolve().parent
for env_file in (".env", ".env.example"):
    load_dotenv(TEST_ROOT / env_file, override=False)

REACHABLE_PREFIXES = (
    "http://mock",
    "https://mock",
    "http://localhost",
    "http://127.0.0.1",
    "http://test",
    "/",
)


def is_reachable(url: object) -> bool:
    return str(url).startswith(REACHABLE_PREFIXES)


class ExternalHTTPBlocked(RuntimeError):
    """Raised when a test tries to talk to a real remote host."""

    def __init__(self, url: object) -> None:
        super().__init__(f"Outbound HTTP is disabled in tests: {url}")


@pytest.fixture(autouse=True)
def block_external_http(monkeypatch: pytest.MonkeyPatch) -> None:
    send_sync = httpx.Client.request
    send_async = httpx.AsyncClient.request

    def guarded_request(self, method, url, *args, **kwargs):
        if not is_reachable(url):
            raise ExternalHTTPBlocked(url)
        return send_sync(self, method, url, *args, **kwargs)

    async def guarded_async_request(self, method, url, *args, **kwargs):
        if not is_reachable(url):
            raise ExternalHTTPBlocked(url)
        return await send_async(self, method, url, *args, **kwargs)

    monkeypatch.setattr(httpx.Client, "request", guarded_request)
    monkeypatch.setattr(httpx.AsyncClient, "request", guarded_async_request)
