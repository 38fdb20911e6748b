"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Iterable

from sqlalchemy import func
from sqlalchemy.orm import Session

from notifyhub.domain.entities import (
    Notification,
    NotificationChannel,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
)
from notifyhub.infrastructure.models import NotificationModel
from notifyhub.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_naive_datetime,
)

_UNREAD_STATUSES = (
    NotificationStatus.PENDING.value,
    NotificationStatus.PROCESSING.value,
    NotificationStatus.SENT.value,
    NotificationStatus.DELIVERED.value,
    NotificationStatus.FAILED.value,
)


class NotificationRepository:
    """Provide CRUD and maintenance operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_id(self, notification_id: str) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def find_by_user_id(
        self,
        user_id: str,
        *,
        status: NotificationStatus | str | None = None,
        type: NotificationType | str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> Sequence[Notification]:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id
        )
        if status is not None:
            query = query.filter(NotificationModel.status == NotificationStatus(status).value)
        if type is not None:
            query = query.filter(NotificationModel.type == NotificationType(type).value)
        query = query.order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel(id=notification.id)
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, notification: Notification) -> Notification:
        model = self.session.get(NotificationModel, notification.id)
        if model is None:
            msg = f"Notification with id {notification.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def delete(self, notification_id: str) -> bool:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return False
        self.session.delete(model)
        self.session.commit()
        return True

    def count_by_status(self, user_id: str) -> dict[str, int]:
        rows = (
            self.session.query(NotificationModel.status, func.count(NotificationModel.id))
            .filter(NotificationModel.user_id == user_id)
            .group_by(NotificationModel.status)
            .all()
        )
        counts = {status.value: 0 for status in NotificationStatus}
        for status, total in rows:
            counts[status] = total
        return counts

    def get_unread_count(self, user_id: str) -> int:
        return (
            self._unread_query(user_id)
            .with_entities(func.count(NotificationModel.id))
            .scalar()
            or 0
        )

    def find_unread_by_user(
        self, user_id: str, *, limit: int | None = 50
    ) -> Sequence[Notification]:
        query = self._unread_query(user_id).order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def mark_as_read(self, notification_ids: Iterable[str], *, user_id: str) -> int:
        ids = [notification_id for notification_id in notification_ids if notification_id]
        if not ids:
            return 0
        return self._mark_read(self._unread_query(user_id).filter(NotificationModel.id.in_(ids)))

    def mark_all_as_read(self, user_id: str) -> int:
        return self._mark_read(self._unread_query(user_id))

    def find_pending(self, *, limit: int = 100) -> Sequence[Notification]:
        now = now_in_app_naive_datetime()
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.status == NotificationStatus.PENDING.value)
            .filter(
                (NotificationModel.scheduled_for.is_(None))
                | (NotificationModel.scheduled_for <= now)
            )
            .order_by(NotificationModel.created_at.asc())
            .limit(limit)
        )
        return [self._to_entity(model) for model in query.all()]

    def find_scheduled(self, before: datetime) -> Sequence[Notification]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.status == NotificationStatus.PENDING.value)
            .filter(NotificationModel.scheduled_for.is_not(None))
            .filter(NotificationModel.scheduled_for <= ensure_app_naive_datetime(before))
            .order_by(NotificationModel.scheduled_for.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def find_failed(self, max_retries: int) -> Sequence[Notification]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.status == NotificationStatus.FAILED.value)
            .filter(NotificationModel.retry_count < max_retries)
            .order_by(NotificationModel.updated_at.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def find_expired(self) -> Sequence[Notification]:
        return [self._to_entity(model) for model in self._expired_query().all()]

    def delete_expired(self) -> int:
        deleted = self._expired_query().delete(synchronize_session=False)
        self.session.commit()
        return deleted

    def delete_older_than(self, date: datetime) -> int:
        deleted = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.created_at < ensure_app_naive_datetime(date))
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    def _unread_query(self, user_id: str):
        return (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.read_at.is_(None))
            .filter(NotificationModel.status.in_(_UNREAD_STATUSES))
        )

    def _expired_query(self):
        return self.session.query(NotificationModel).filter(
            NotificationModel.expires_at.is_not(None),
            NotificationModel.expires_at < now_in_app_naive_datetime(),
        )

    def _mark_read(self, query) -> int:
        now = now_in_app_naive_datetime()
        updated = query.update(
            {
                NotificationModel.read_at: now,
                NotificationModel.status: NotificationStatus.READ.value,
                NotificationModel.updated_at: now,
            },
            synchronize_session=False,
        )
        self.session.commit()
        return updated

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        model.user_id = notification.user_id
        model.type = notification.type.value
        model.title = notification.title
        model.message = notification.message
        model.channels = [channel.value for channel in notification.channels]
        model.status = notification.status.value
        model.priority = notification.priority.value
        model.template_id = notification.template_id
        model.scheduled_for = ensure_app_naive_datetime(notification.scheduled_for)
        model.sent_at = ensure_app_naive_datetime(notification.sent_at)
        model.delivered_at = ensure_app_naive_datetime(notification.delivered_at)
        model.read_at = ensure_app_naive_datetime(notification.read_at)
        model.expires_at = ensure_app_naive_datetime(notification.expires_at)
        model.metadata_ = dict(notification.metadata or {})
        model.delivery_data = dict(notification.delivery_data or {})
        model.retry_count = notification.retry_count
        model.max_retries = notification.max_retries
        model.last_error = notification.last_error
        model.created_at = (
            ensure_app_naive_datetime(notification.created_at) or now_in_app_naive_datetime()
        )
        model.updated_at = (
            ensure_app_naive_datetime(notification.updated_at) or now_in_app_naive_datetime()
        )

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=NotificationType(model.type),
            title=model.title,
            message=model.message,
            channels=tuple(NotificationChannel(channel) for channel in model.channels or []),
            status=NotificationStatus(model.status),
            priority=NotificationPriority(model.priority),
            template_id=model.template_id,
            scheduled_for=ensure_app_timezone(model.scheduled_for),
            sent_at=ensure_app_timezone(model.sent_at),
            delivered_at=ensure_app_timezone(model.delivered_at),
            read_at=ensure_app_timezone(model.read_at),
            expires_at=ensure_app_timezone(model.expires_at),
            metadata=dict(model.metadata_ or {}),
            delivery_data=dict(model.delivery_data or {}),
            retry_count=model.retry_count,
            max_retries=model.max_retries,
            last_error=model.last_error,
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["NotificationRepository"]
