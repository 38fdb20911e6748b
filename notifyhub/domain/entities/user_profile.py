"""Domain entity holding the public profile of a user."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any
from urllib.parse import urlparse

from notifyhub.domain.errors import DomainError, ErrorKind
from notifyhub.utils import advance_past, now_in_app_timezone

GENDERS = ("male", "female", "other", "prefer_not_to_say")

_MAX_LENGTHS: dict[str, int] = {
    "first_name": 100,
    "last_name": 100,
    "display_name": 255,
    "bio": 1000,
    "website": 500,
    "location": 255,
    "timezone": 50,
    "language": 10,
    "phone_number": 20,
}

# Attributes callers may change through ``UserProfile.apply_changes``.
EDITABLE_FIELDS = (
    "first_name",
    "last_name",
    "display_name",
    "bio",
    "website",
    "location",
    "timezone",
    "language",
    "gender",
    "date_of_birth",
    "phone_number",
    "social_links",
    "preferences",
    "avatar_url",
)


@dataclass(frozen=True)
class UserProfile:
    """Personal, contact and preference attributes of a user."""

    id: str
    user_id: str
    first_name: str | None = None
    last_name: str | None = None
    display_name: str | None = None
    bio: str | None = None
    website: str | None = None
    location: str | None = None
    timezone: str = "UTC"
    language: str = "en"
    gender: str | None = None
    date_of_birth: date | None = None
    phone_number: str | None = None
    is_phone_verified: bool = False
    social_links: dict[str, str] = field(default_factory=dict)
    preferences: dict[str, Any] = field(default_factory=dict)
    avatar_url: str | None = None
    is_email_verified: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def create(cls, *, user_id: str, **attributes: Any) -> "UserProfile":
        now = now_in_app_timezone()
        profile = cls(
            id=str(uuid.uuid4()),
            user_id=user_id,
            created_at=now,
            updated_at=now,
            **attributes,
        )
        if profile.display_name is None and profile.get_full_name():
            profile = replace(profile, display_name=profile.get_full_name())
        profile.ensure_valid()
        return profile

    def validate(self) -> list[str]:
        """Return the list of ``field: problem`` messages for this profile."""

        errors: list[str] = []
        for attribute, limit in _MAX_LENGTHS.items():
            value = getattr(self, attribute)
            if isinstance(value, str) and len(value) > limit:
                errors.append(f"{attribute}: Must be at most {limit} characters")
        if self.gender is not None and self.gender not in GENDERS:
            errors.append(f"gender: Expected one of {', '.join(GENDERS)}")
        if not self.has_valid_website():
            errors.append("website: Invalid URL")
        if self.date_of_birth is not None and self.date_of_birth > now_in_app_timezone().date():
            errors.append("date_of_birth: Cannot be in the future")
        if not all(isinstance(value, str) for value in self.social_links.values()):
            errors.append("social_links: Links must be strings")
        return errors

    def ensure_valid(self) -> None:
        errors = self.validate()
        if errors:
            raise DomainError(ErrorKind.VALIDATION, f"Validation failed: {', '.join(errors)}")

    def changed_fields(self, changes: dict[str, Any]) -> dict[str, tuple[Any, Any]]:
        """Return ``{field: (previous, new)}`` for entries of ``changes`` that differ."""

        diff: dict[str, tuple[Any, Any]] = {}
        for attribute, value in changes.items():
            if attribute not in EDITABLE_FIELDS:
                raise DomainError(
                    ErrorKind.VALIDATION, f"Validation failed: {attribute}: Field cannot be updated"
                )
            previous = getattr(self, attribute)
            if previous != value:
                diff[attribute] = (previous, value)
        return diff

    def apply_changes(self, changes: dict[str, Any]) -> "UserProfile":
        """Return a copy with ``changes`` applied.

        A different phone number clears the phone verification flag.
        """

        if not changes:
            return self
        extra: dict[str, Any] = {}
        if "phone_number" in changes and changes["phone_number"] != self.phone_number:
            extra["is_phone_verified"] = False
        updated = replace(
            self, updated_at=advance_past(self.updated_at), **changes, **extra
        )
        updated.ensure_valid()
        return updated

    def update_personal_info(self, **changes: Any) -> "UserProfile":
        return self.apply_changes(changes)

    def update_contact_info(self, *, phone_number: str | None) -> "UserProfile":
        return self.apply_changes({"phone_number": phone_number})

    def update_preferences(self, preferences: dict[str, Any]) -> "UserProfile":
        return self.apply_changes({"preferences": {**self.preferences, **preferences}})

    def update_avatar(self, avatar_url: str | None) -> "UserProfile":
        return self.apply_changes({"avatar_url": avatar_url})

    def verify_phone_number(self) -> "UserProfile":
        if not self.phone_number:
            raise DomainError(ErrorKind.BUSINESS_RULE, "No phone number to verify")
        return replace(self, is_phone_verified=True, updated_at=advance_past(self.updated_at))

    def get_full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part).strip()

    def get_display_name(self) -> str:
        return self.display_name or self.get_full_name() or "Unknown User"

    def has_valid_website(self) -> bool:
        if not self.website:
            return True
        parsed = urlparse(self.website)
        return bool(parsed.scheme and parsed.netloc)

    def is_adult(self, today: date | None = None) -> bool:
        if self.date_of_birth is None:
            return False
        today = today or now_in_app_timezone().date()
        born = self.date_of_birth
        age = today.year - born.year - ((today.month, today.day) < (born.month, born.day))
        return age >= 18


__all__ = ["EDITABLE_FIELDS", "GENDERS", "UserProfile"]
