"""Fan-out of a notification to the providers of its channels."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum

import anyio

from notifyhub.domain.entities import (
    ChannelDelivery,
    DeliveryResult,
    Notification,
    NotificationChannel,
)

from .ports import ProviderLookup

logger = logging.getLogger(__name__)


class DispatchMode(str, Enum):
    """How channel providers are awaited for one notification."""

    SEQUENTIAL = "sequential"
    CONCURRENT = "concurrent"


class ChannelDispatcher:
    """Send a notification through each channel and collect the outcomes.

    Results are always returned in the order of ``channels``. A missing
    provider, a provider exception and a provider exceeding ``timeout`` seconds
    all become failed :class:`DeliveryResult` values; nothing is raised.
    """

    def __init__(
        self,
        providers: ProviderLookup,
        *,
        mode: DispatchMode | str = DispatchMode.CONCURRENT,
        timeout: float | None = None,
    ) -> None:
        self._providers = providers
        self.mode = DispatchMode(mode)
        self.timeout = timeout

    async def dispatch(
        self,
        notification: Notification,
        channels: Sequence[NotificationChannel],
        recipient: str,
    ) -> list[ChannelDelivery]:
        if self.mode is DispatchMode.SEQUENTIAL:
            return [await self._deliver(notification, channel, recipient) for channel in channels]

        results: list[ChannelDelivery | None] = [None] * len(channels)

        async def _run(index: int, channel: NotificationChannel) -> None:
            results[index] = await self._deliver(notification, channel, recipient)

        async with anyio.create_task_group() as task_group:
            for index, channel in enumerate(channels):
                task_group.start_soon(_run, index, channel)

        return [result for result in results if result is not None]

    async def _deliver(
        self, notification: Notification, channel: NotificationChannel, recipient: str
    ) -> ChannelDelivery:
        provider = self._providers.get(channel)
        if provider is None:
            logger.warning("No provider registered for channel %s", channel.value)
            return ChannelDelivery(
                channel, DeliveryResult.failed(f"No provider found for channel: {channel.value}")
            )

        try:
            with anyio.fail_after(self.timeout):
                result = await provider.send(notification, recipient)
        except TimeoutError:
            logger.warning(
                "Provider %s timed out after %ss for notification %s",
                provider.name,
                self.timeout,
                notification.id,
            )
            result = DeliveryResult.failed(f"Provider timed out for channel: {channel.value}")
        except Exception as exc:
            logger.exception(
                "Provider %s raised while sending notification %s", provider.name, notification.id
            )
            result = DeliveryResult.failed(str(exc) or "Provider error")

        if not result.success:
            logger.warning(
                "Delivery through %s failed for notification %s: %s",
                channel.value,
                notification.id,
                result.error,
            )
        return ChannelDelivery(channel, result)


__all__ = ["ChannelDispatcher", "DispatchMode"]
