"""Tests for email digests."""

import asyncio
import json
from datetime import datetime

import httpx
import pytest

from energy_events.errors import ConfigurationError, EmailDeliveryError
from energy_events.notifiers import EmailMessage, build_digest, send_digest, send_email
from energy_events.notifiers import email as email_module


def run_with(handler, coro_factory):
    async def main():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await coro_factory(client)

    return asyncio.run(main())


class TestBuildDigest:
    """Tests for digest rendering."""

    def test_lists_events(self, make_event):
        events = [make_event("Solar Finance Summit"), make_event("Wind Forum", date=None)]
        subject, body = build_digest(events, now=datetime(2025, 6, 1))
        assert subject == "DC energy events: 2 upcoming (Jun 01, 2025)"
        assert "Solar Finance Summit" in body
        assert "https://example.org/events/solar-finance-summit" in body
        assert "Date TBD" in body

    def test_truncates(self, make_event):
        events = [make_event(f"Energy Talk {i}") for i in range(25)]
        _, body = build_digest(events, limit=20)
        assert "Energy Talk 19" in body
        assert "Energy Talk 20" not in body
        assert "...and 5 more." in body

    def test_empty(self):
        _, body = build_digest([])
        assert "No upcoming energy events" in body


class TestSendEmail:
    """Tests for delivery through the Resend API."""

    def test_posts_message(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["auth"] = request.headers["authorization"]
            captured["payload"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "msg_123"})

        message = EmailMessage(to="reader@example.org", subject="Hello", body="Body")
        message_id = run_with(
            handler,
            lambda client: send_email(message, client=client, api_key="re_test", sender="Events <e@example.org>"),
        )
        assert message_id == "msg_123"
        assert captured["auth"] == "Bearer re_test"
        assert captured["payload"] == {
            "from": "Events <e@example.org>",
            "to": ["reader@example.org"],
            "subject": "Hello",
            "text": "Body",
        }

    def test_provider_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(422, json={"message": "invalid to"})

        message = EmailMessage(to="reader@example.org", subject="Hello", body="Body")
        with pytest.raises(EmailDeliveryError) as excinfo:
            run_with(handler, lambda client: send_email(message, client=client, api_key="re_test"))
        assert excinfo.value.status == 422

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.setattr(email_module, "RESEND_API_KEY", None)
        message = EmailMessage(to="reader@example.org", subject="Hello", body="Body")
        with pytest.raises(ConfigurationError):
            asyncio.run(send_email(message))


class TestSendDigest:
    """Tests for fan-out to subscribers."""

    def test_one_failure_does_not_stop_others(self, monkeypatch, make_event):
        monkeypatch.setattr(email_module, "RESEND_API_KEY", "re_test")

        def handler(request: httpx.Request) -> httpx.Response:
            payload = json.loads(request.content)
            if payload["to"] == ["bounce@example.org"]:
                return httpx.Response(422, json={"message": "bounced"})
            return httpx.Response(200, json={"id": "ok"})

        recipients = ["a@example.org", "bounce@example.org", "b@example.org"]
        result = run_with(
            handler,
            lambda client: send_digest([make_event()], recipients, client=client),
        )
        assert result["sent"] == 2
        assert result["failed"] == 1
        assert list(result["errors"]) == ["bounce@example.org"]
