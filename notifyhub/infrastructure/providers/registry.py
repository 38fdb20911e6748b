"""Lookup table from channel to the provider that serves it."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from notifyhub.domain.entities import NotificationChannel

from .base import NotificationProvider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Hold registered providers keyed by name and grouped by channel.

    The first available provider registered for a channel serves it.
    """

    def __init__(self, providers: Iterable[NotificationProvider] = ()) -> None:
        self._providers: dict[str, NotificationProvider] = {}
        for provider in providers:
            self.register(provider)

    def register(self, provider: NotificationProvider) -> None:
        if provider.name in self._providers:
            logger.warning("Replacing notification provider %s", provider.name)
        self._providers[provider.name] = provider
        logger.debug(
            "Registered notification provider %s for channel %s",
            provider.name,
            provider.channel.value,
        )

    def unregister(self, name: str) -> bool:
        return self._providers.pop(name, None) is not None

    def get(self, channel: NotificationChannel | str) -> NotificationProvider | None:
        """Return the provider serving ``channel`` or ``None``."""

        for provider in self.get_by_type(channel):
            if provider.is_available():
                return provider
        return None

    def get_by_type(self, channel: NotificationChannel | str) -> list[NotificationProvider]:
        member = NotificationChannel(channel)
        return [provider for provider in self._providers.values() if provider.channel is member]

    def get_by_name(self, name: str) -> NotificationProvider | None:
        return self._providers.get(name)

    def all(self) -> list[NotificationProvider]:
        return list(self._providers.values())

    def channels(self) -> list[NotificationChannel]:
        """Return the channels that currently have an available provider."""

        return [channel for channel in NotificationChannel if self.get(channel) is not None]

    def __len__(self) -> int:
        return len(self._providers)

    def __contains__(self, channel: object) -> bool:
        try:
            return self.get(channel) is not None  # type: ignore[arg-type]
        except ValueError:
            return False


__all__ = ["ProviderRegistry"]
