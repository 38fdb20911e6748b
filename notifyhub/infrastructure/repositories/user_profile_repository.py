"""Persistence layer for user profiles and the user activity log."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from notifyhub.domain.entities import UserActivity, UserProfile
from notifyhub.infrastructure.models import UserActivityModel, UserProfileModel
from notifyhub.utils import ensure_app_naive_datetime, ensure_app_timezone


class UserProfileRepository:
    """Provide read and write access to :class:`UserProfile` records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_user_id(self, user_id: str) -> UserProfile | None:
        model = self.session.query(UserProfileModel).filter_by(user_id=user_id).first()
        return self._to_entity(model) if model else None

    def save(self, profile: UserProfile) -> UserProfile:
        model = self.session.get(UserProfileModel, profile.id)
        if model is None:
            model = UserProfileModel(id=profile.id)
        self._apply_entity_to_model(model, profile)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _apply_entity_to_model(model: UserProfileModel, profile: UserProfile) -> None:
        model.user_id = profile.user_id
        model.first_name = profile.first_name
        model.last_name = profile.last_name
        model.display_name = profile.display_name
        model.bio = profile.bio
        model.website = profile.website
        model.location = profile.location
        model.timezone = profile.timezone
        model.language = profile.language
        model.gender = profile.gender
        model.date_of_birth = profile.date_of_birth
        model.phone_number = profile.phone_number
        model.is_phone_verified = profile.is_phone_verified
        model.social_links = dict(profile.social_links)
        model.preferences = dict(profile.preferences)
        model.avatar_url = profile.avatar_url
        model.is_email_verified = profile.is_email_verified
        model.created_at = ensure_app_naive_datetime(profile.created_at)
        model.updated_at = ensure_app_naive_datetime(profile.updated_at)

    @staticmethod
    def _to_entity(model: UserProfileModel) -> UserProfile:
        return UserProfile(
            id=model.id,
            user_id=model.user_id,
            first_name=model.first_name,
            last_name=model.last_name,
            display_name=model.display_name,
            bio=model.bio,
            website=model.website,
            location=model.location,
            timezone=model.timezone,
            language=model.language,
            gender=model.gender,
            date_of_birth=model.date_of_birth,
            phone_number=model.phone_number,
            is_phone_verified=model.is_phone_verified,
            social_links=dict(model.social_links or {}),
            preferences=dict(model.preferences or {}),
            avatar_url=model.avatar_url,
            is_email_verified=model.is_email_verified,
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


class UserActivityRepository:
    """Append and query :class:`UserActivity` entries."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, activity: UserActivity) -> UserActivity:
        model = UserActivityModel(
            id=activity.id,
            user_id=activity.user_id,
            type=activity.type,
            action=activity.action,
            description=activity.description,
            resource=activity.resource,
            resource_id=activity.resource_id,
            metadata_=dict(activity.metadata),
            ip_address=activity.ip_address,
            user_agent=activity.user_agent,
            created_at=ensure_app_naive_datetime(activity.created_at),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_for_user(
        self, user_id: str, *, limit: int = 10, type: str | None = None
    ) -> Sequence[UserActivity]:
        query = self.session.query(UserActivityModel).filter(
            UserActivityModel.user_id == user_id
        )
        if type:
            query = query.filter(UserActivityModel.type == type.strip().lower())
        query = query.order_by(UserActivityModel.created_at.desc()).limit(limit)
        return [self._to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: UserActivityModel) -> UserActivity:
        return UserActivity(
            id=model.id,
            user_id=model.user_id,
            type=model.type,
            action=model.action,
            description=model.description,
            resource=model.resource,
            resource_id=model.resource_id,
            metadata=dict(model.metadata_ or {}),
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["UserActivityRepository", "UserProfileRepository"]
