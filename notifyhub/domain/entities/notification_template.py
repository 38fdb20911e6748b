"""Domain entity describing a reusable notification template."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Mapping

from notifyhub.domain.errors import DomainError, ErrorKind
from notifyhub.utils import advance_past, now_in_app_timezone

from .notification import NotificationChannel, NotificationType

_PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([A-Za-z0-9_.-]+)\s*\}\}")
_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:[-_][a-z0-9]+)*$")


def render_placeholders(text: str, values: Mapping[str, Any]) -> str:
    """Replace ``{{ name }}`` placeholders in ``text`` with ``values``.

    Placeholders without a value are left untouched.
    """

    def _substitute(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in values or values[key] is None:
            return match.group(0)
        return str(values[key])

    return _PLACEHOLDER_PATTERN.sub(_substitute, text)


def extract_placeholders(text: str) -> list[str]:
    """Return placeholder names found in ``text`` in order of appearance."""

    names: list[str] = []
    for name in _PLACEHOLDER_PATTERN.findall(text or ""):
        if name not in names:
            names.append(name)
    return names


@dataclass(frozen=True)
class NotificationTemplate:
    """Body (and optional subject) with ``{{ variable }}`` placeholders."""

    id: str
    name: str
    slug: str
    type: NotificationType
    channel: NotificationChannel
    template: str
    subject: str | None = None
    description: str | None = None
    variables: tuple[str, ...] = ()
    default_values: dict[str, Any] = field(default_factory=dict)
    is_system: bool = False
    is_active: bool = True
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def create(
        cls,
        *,
        name: str,
        slug: str,
        type: NotificationType | str,
        channel: NotificationChannel | str,
        template: str,
        subject: str | None = None,
        description: str | None = None,
        variables: list[str] | None = None,
        default_values: dict[str, Any] | None = None,
        is_system: bool = False,
        metadata: dict[str, Any] | None = None,
    ) -> "NotificationTemplate":
        errors: list[str] = []
        if not name or not name.strip():
            errors.append("name: Name is required")
        normalized_slug = (slug or "").strip().lower()
        if not _SLUG_PATTERN.match(normalized_slug):
            errors.append("slug: Slug may only contain lowercase letters, digits, '-' and '_'")
        if not template or not template.strip():
            errors.append("template: Template body is required")
        try:
            type_member = NotificationType(type)
        except ValueError:
            errors.append("type: Invalid notification type")
        try:
            channel_member = NotificationChannel(channel)
        except ValueError:
            errors.append("channel: Invalid channel")
        if errors:
            raise DomainError(ErrorKind.VALIDATION, f"Validation failed: {', '.join(errors)}")

        declared = list(variables or [])
        for placeholder in extract_placeholders(template) + extract_placeholders(subject or ""):
            if placeholder not in declared:
                declared.append(placeholder)

        now = now_in_app_timezone()
        return cls(
            id=str(uuid.uuid4()),
            name=name.strip(),
            slug=normalized_slug,
            type=type_member,
            channel=channel_member,
            template=template,
            subject=subject,
            description=description.strip() if description else None,
            variables=tuple(declared),
            default_values=dict(default_values or {}),
            is_system=is_system,
            metadata=dict(metadata or {}),
            created_at=now,
            updated_at=now,
        )

    def render(self, variables: Mapping[str, Any] | None = None) -> str:
        """Return the body with placeholders filled from defaults and ``variables``."""

        return render_placeholders(self.template, self._merged(variables))

    def render_subject(self, variables: Mapping[str, Any] | None = None) -> str | None:
        """Return the rendered subject, or ``None`` when there is nothing to render."""

        if not self.subject:
            return None
        rendered = render_placeholders(self.subject, self._merged(variables))
        return rendered or None

    def missing_variables(self, variables: Mapping[str, Any] | None = None) -> list[str]:
        merged = self._merged(variables)
        return [name for name in self.variables if merged.get(name) is None]

    def activate(self) -> "NotificationTemplate":
        if self.is_active:
            return self
        return replace(self, is_active=True, updated_at=advance_past(self.updated_at))

    def deactivate(self) -> "NotificationTemplate":
        if not self.is_active:
            return self
        return replace(self, is_active=False, updated_at=advance_past(self.updated_at))

    def _merged(self, variables: Mapping[str, Any] | None) -> dict[str, Any]:
        return {**self.default_values, **(variables or {})}


__all__ = ["NotificationTemplate", "extract_placeholders", "render_placeholders"]
