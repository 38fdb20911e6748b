"""Utility helpers for sending transactional email notifications via SendGrid."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from notifyhub.config import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailDelivery:
    """Outcome of a SendGrid request."""

    sent: bool
    message_id: str | None = None
    status_code: int | None = None
    error: str | None = None


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages: list[str] = []
            for item in errors:
                if not isinstance(item, dict):
                    continue
                message = item.get("message")
                help_link = item.get("help")
                if message and help_link:
                    messages.append(f"{message} (help: {help_link})")
                elif message:
                    messages.append(str(message))
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _describe_sendgrid_exception(exc: Exception) -> str:
    """Log a SendGrid API error and return a short description of it."""

    status_code = getattr(exc, "status_code", None)
    details = _extract_sendgrid_error_details(getattr(exc, "body", None))

    if status_code and details:
        logger.error("SendGrid API request failed with status %s: %s", status_code, details)
        return f"SendGrid request failed with status {status_code}: {details}"
    if status_code:
        logger.error("SendGrid API request failed with status %s", status_code)
        return f"SendGrid request failed with status {status_code}"
    if details:
        logger.error("SendGrid API request failed: %s", details)
        return f"SendGrid request failed: {details}"
    logger.exception("Error sending email via SendGrid: %s", exc)
    return str(exc) or "SendGrid request failed"


def _message_id_from(response: Any) -> str | None:
    headers = getattr(response, "headers", None) or {}
    try:
        return headers.get("X-Message-Id") or headers.get("x-message-id")
    except AttributeError:
        return None


def send_email(
    subject: str,
    html_content: str,
    recipient: str,
    *,
    settings: Settings | None = None,
) -> EmailDelivery:
    """Send an email using the configured SendGrid credentials."""

    settings = settings or get_settings()
    if not settings.email_enabled:
        logger.info("SendGrid configuration incomplete; skipping email delivery")
        return EmailDelivery(sent=False, error="Email delivery is not configured")

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        client = SendGridAPIClient(settings.sendgrid_api_key)
        response = client.send(message)
    except Exception as exc:  # pragma: no cover - network failures depend on environment
        return EmailDelivery(sent=False, error=_describe_sendgrid_exception(exc))

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        details = _extract_sendgrid_error_details(getattr(response, "body", None))
        if details:
            logger.error("SendGrid API responded with status %s: %s", status_code, details)
        else:
            logger.error("SendGrid API responded with status %s", status_code)
        return EmailDelivery(
            sent=False,
            status_code=status_code if isinstance(status_code, int) else None,
            error=f"SendGrid responded with status {status_code}",
        )

    return EmailDelivery(sent=True, message_id=_message_id_from(response), status_code=status_code)


__all__ = ["EmailDelivery", "send_email"]
