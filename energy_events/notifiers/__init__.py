"""Outbound notifications for feed subscribers."""

from energy_events.notifiers.email import (
    EmailMessage,
    build_digest,
    send_digest,
    send_email,
)

__all__ = ["EmailMessage", "build_digest", "send_digest", "send_email"]
