"""Provider delivering notifications by email through SendGrid."""

from __future__ import annotations

import html
import logging
from collections.abc import Callable

from anyio import to_thread

from notifyhub.config import Settings
from notifyhub.domain.entities import DeliveryResult, Notification, NotificationChannel
from notifyhub.infrastructure.email import send_email

logger = logging.getLogger(__name__)

EmailResolver = Callable[[str], "str | None"]


def render_email_body(notification: Notification) -> str:
    """Return the HTML body used for ``notification``."""

    paragraphs = "".join(
        f"<p>{html.escape(line)}</p>" for line in notification.message.splitlines() if line
    )
    return f"<h2>{html.escape(notification.title)}</h2>{paragraphs}"


class SendGridEmailProvider:
    """Send notifications to the recipient's email address.

    ``resolve_email`` maps a user identifier to an address; recipients that
    already look like an address are used as-is.
    """

    channel = NotificationChannel.EMAIL
    name = "sendgrid"

    def __init__(self, settings: Settings, resolve_email: EmailResolver) -> None:
        self._settings = settings
        self._resolve_email = resolve_email

    def is_available(self) -> bool:
        return self._settings.email_enabled

    async def send(self, notification: Notification, recipient: str) -> DeliveryResult:
        # Address lookup and the SendGrid client are both blocking. The worker
        # thread is abandoned when the dispatcher timeout cancels the call.
        return await to_thread.run_sync(
            self._deliver, notification, recipient, abandon_on_cancel=True
        )

    def _deliver(self, notification: Notification, recipient: str) -> DeliveryResult:
        address = recipient if "@" in recipient else self._resolve_email(recipient)
        if not address:
            return DeliveryResult.failed(f"No email address found for recipient: {recipient}")

        delivery = send_email(
            notification.title,
            render_email_body(notification),
            address,
            settings=self._settings,
        )
        if not delivery.sent:
            return DeliveryResult.failed(
                delivery.error or "Email delivery failed", status_code=delivery.status_code
            )
        logger.info("Email notification %s sent to %s", notification.id, address)
        return DeliveryResult.ok(delivery.message_id, status_code=delivery.status_code)


__all__ = ["SendGridEmailProvider", "render_email_body"]
