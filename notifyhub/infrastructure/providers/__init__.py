"""Channel providers and the registry used to look them up."""

from .base import NotificationProvider
from .email import SendGridEmailProvider
from .in_app import InAppProvider
from .logging_provider import LoggingProvider
from .registry import ProviderRegistry

__all__ = [
    "InAppProvider",
    "LoggingProvider",
    "NotificationProvider",
    "ProviderRegistry",
    "SendGridEmailProvider",
]
