"""Persistence layer for user data."""

from __future__ import annotations

from sqlalchemy.orm import Session, joinedload

from notifyhub.domain.entities import User
from notifyhub.infrastructure.models import UserModel
from notifyhub.utils import ensure_app_naive_datetime, ensure_app_timezone

from .role_repository import RoleRepository


class UserRepository:
    """Provide CRUD operations for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> User | None:
        model = self._get_model(id=user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = self._get_model(email=email.strip().lower())
        return self._to_entity(model) if model else None

    def create(self, user: User) -> User:
        model = UserModel(id=user.id)
        self._apply_entity_to_model(model, user)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, user: User) -> User:
        model = self._get_model(id=user.id)
        if not model:
            msg = f"User with id {user.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, user)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def count_by_role(self, role_id: str) -> int:
        return self.session.query(UserModel).filter(UserModel.role_id == role_id).count()

    def _get_model(self, **filters) -> UserModel | None:
        query = self.session.query(UserModel).options(joinedload(UserModel.role))
        return query.filter_by(**filters).first()

    @staticmethod
    def _apply_entity_to_model(model: UserModel, user: User) -> None:
        model.role_id = user.role.id
        model.name = user.name
        model.email = user.email.strip().lower()
        model.password = user.password
        model.is_active = user.is_active
        model.last_login = ensure_app_naive_datetime(user.last_login)
        if user.created_at is not None:
            model.created_at = ensure_app_naive_datetime(user.created_at)
        model.updated_at = ensure_app_naive_datetime(user.updated_at)

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        if model.role is None:
            msg = "User role is not set"
            raise ValueError(msg)
        return User(
            id=model.id,
            role=RoleRepository._to_entity(model.role),
            name=model.name,
            email=model.email,
            password=model.password,
            is_active=model.is_active,
            last_login=ensure_app_timezone(model.last_login),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["UserRepository"]
