"""Use cases managing notification templates."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from notifyhub.domain.entities import NotificationTemplate
from notifyhub.domain.errors import DomainError, ErrorKind
from notifyhub.domain.result import Err, Ok, Result

from ..errors import unexpected_error
from .ports import TemplateStore

logger = logging.getLogger(__name__)


@dataclass
class CreateTemplateRequest:
    name: str
    slug: str
    type: str
    channel: str
    template: str
    subject: str | None = None
    description: str | None = None
    variables: list[str] | None = None
    default_values: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None


class CreateNotificationTemplateUseCase:
    def __init__(self, templates: TemplateStore) -> None:
        self._templates = templates

    def execute(self, request: CreateTemplateRequest) -> Result[NotificationTemplate]:
        try:
            template = NotificationTemplate.create(
                name=request.name,
                slug=request.slug,
                type=request.type,
                channel=request.channel,
                template=request.template,
                subject=request.subject,
                description=request.description,
                variables=request.variables,
                default_values=request.default_values,
                metadata=request.metadata,
            )
            if self._templates.find_by_slug(template.slug) is not None:
                return Err.of(
                    ErrorKind.CONFLICT,
                    f"Notification template with slug '{template.slug}' already exists",
                )
            created = self._templates.create(template)
            logger.info("Notification template %s created", created.slug)
            return Ok(created)
        except DomainError as exc:
            return Err(exc)
        except Exception as exc:
            logger.exception("Failed to create notification template %s", request.slug)
            return unexpected_error(exc)


class ListNotificationTemplatesUseCase:
    def __init__(self, templates: TemplateStore) -> None:
        self._templates = templates

    def execute(self, *, active_only: bool = False) -> Result[list[NotificationTemplate]]:
        try:
            return Ok(list(self._templates.list(active_only=active_only)))
        except Exception as exc:
            logger.exception("Failed to list notification templates")
            return unexpected_error(exc)


__all__ = [
    "CreateNotificationTemplateUseCase",
    "CreateTemplateRequest",
    "ListNotificationTemplatesUseCase",
]
