"""Email digests of the event feed, delivered through the Resend HTTP API.

A digest is a plain-text rendering of the current feed. Delivery is one POST
per recipient; failures for one subscriber do not stop the others.
"""

from datetime import datetime
from typing import Optional

import httpx
from pydantic import BaseModel
from rich.console import Console

from energy_events.config import EMAIL_FROM, RESEND_API_KEY, RESEND_API_URL
from energy_events.errors import ConfigurationError, EmailDeliveryError
from energy_events.models import CandidateEvent

console = Console()

DIGEST_LIMIT = 20


class EmailMessage(BaseModel):
    """One outgoing email."""

    to: str
    subject: str
    body: str


def format_event(event: CandidateEvent) -> str:
    when = event.date or "Date TBD"
    if event.time:
        when = f"{when} {event.time}"
    lines = [
        f"- {event.title}",
        f"  {when} | {event.location} | {event.host}",
        f"  {event.link}",
    ]
    return "\n".join(lines)


def build_digest(
    events: list[CandidateEvent],
    now: Optional[datetime] = None,
    limit: int = DIGEST_LIMIT,
) -> tuple[str, str]:
    """Render a feed as (subject, plain-text body)."""
    now = now or datetime.now()
    subject = f"DC energy events: {len(events)} upcoming ({now:%b %d, %Y})"

    if not events:
        return subject, "No upcoming energy events were found this time.\n"

    sections = [format_event(event) for event in events[:limit]]
    body = "Upcoming energy events in Washington DC\n\n" + "\n\n".join(sections)
    if len(events) > limit:
        body += f"\n\n...and {len(events) - limit} more."
    return subject, body + "\n"


async def send_email(
    message: EmailMessage,
    client: Optional[httpx.AsyncClient] = None,
    api_key: Optional[str] = None,
    sender: Optional[str] = None,
) -> str:
    """Send one message. Returns the provider's message id.

    Raises:
        ConfigurationError: RESEND_API_KEY is not set
        EmailDeliveryError: the provider rejected the message or was unreachable
    """
    api_key = api_key or RESEND_API_KEY
    if not api_key:
        raise ConfigurationError("RESEND_API_KEY must be set in environment")

    payload = {
        "from": sender or EMAIL_FROM,
        "to": [message.to],
        "subject": message.subject,
        "text": message.body,
    }
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=30.0)

    try:
        response = await client.post(RESEND_API_URL, json=payload, headers=headers)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise EmailDeliveryError(
            f"Resend API error {e.response.status_code}: {e.response.text[:200]}",
            status=e.response.status_code,
        ) from e
    except httpx.HTTPError as e:
        raise EmailDeliveryError(f"Resend API unreachable: {e}") from e
    finally:
        if owns_client:
            await client.aclose()

    return response.json().get("id", "")


async def send_digest(
    events: list[CandidateEvent],
    recipients: list[str],
    client: Optional[httpx.AsyncClient] = None,
    now: Optional[datetime] = None,
) -> dict:
    """Send the same digest to every recipient.

    Returns:
        {"sent": int, "failed": int, "errors": {email: message}}
    """
    subject, body = build_digest(events, now=now)
    sent = 0
    errors: dict[str, str] = {}

    for recipient in recipients:
        message = EmailMessage(to=recipient, subject=subject, body=body)
        try:
            await send_email(message, client=client)
        except EmailDeliveryError as e:
            console.print(f"[red]Digest to {recipient} failed: {e}[/red]")
            errors[recipient] = str(e)
            continue
        sent += 1
        console.print(f"  [dim]Digest sent to {recipient}[/dim]")

    return {"sent": sent, "failed": len(errors), "errors": errors}
