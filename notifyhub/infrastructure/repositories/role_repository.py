"""Persistence layer for roles and role assignments."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from notifyhub.domain.entities import UserRole, UserRoleAssignment
from notifyhub.infrastructure.models import RoleAssignmentModel, RoleModel
from notifyhub.utils import ensure_app_naive_datetime, ensure_app_timezone


class RoleRepository:
    """Provide CRUD access to roles stored in the database."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, role_id: str) -> UserRole | None:
        model = self.session.get(RoleModel, role_id)
        return self._to_entity(model) if model else None

    def get_by_name(self, name: str) -> UserRole | None:
        model = (
            self.session.query(RoleModel)
            .filter(RoleModel.name == name.strip().lower())
            .first()
        )
        return self._to_entity(model) if model else None

    def list(self, *, include_inactive: bool = True) -> Sequence[UserRole]:
        query = self.session.query(RoleModel)
        if not include_inactive:
            query = query.filter(RoleModel.is_active.is_(True))
        query = query.order_by(RoleModel.level.desc(), RoleModel.name.asc())
        return [self._to_entity(model) for model in query.all()]

    def create(self, role: UserRole) -> UserRole:
        model = RoleModel(id=role.id)
        self._apply_entity_to_model(model, role)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, role: UserRole) -> UserRole:
        model = self.session.get(RoleModel, role.id)
        if model is None:
            msg = f"Role with id {role.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, role)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def delete(self, role_id: str) -> None:
        model = self.session.get(RoleModel, role_id)
        if model is None:
            msg = f"Role with id {role_id} not found"
            raise ValueError(msg)
        self.session.query(RoleAssignmentModel).filter(
            RoleAssignmentModel.role_id == role_id
        ).delete(synchronize_session=False)
        self.session.delete(model)
        self.session.commit()

    @staticmethod
    def _apply_entity_to_model(model: RoleModel, role: UserRole) -> None:
        model.name = role.name
        model.display_name = role.display_name
        model.description = role.description
        model.level = role.level
        model.is_system = role.is_system
        model.permissions = list(role.permissions)
        model.metadata_ = dict(role.metadata)
        model.is_active = role.is_active
        model.created_at = ensure_app_naive_datetime(role.created_at)
        model.updated_at = ensure_app_naive_datetime(role.updated_at)

    @staticmethod
    def _to_entity(model: RoleModel) -> UserRole:
        return UserRole(
            id=model.id,
            name=model.name,
            display_name=model.display_name,
            description=model.description,
            level=model.level,
            is_system=model.is_system,
            permissions=tuple(model.permissions or ()),
            metadata=dict(model.metadata_ or {}),
            is_active=model.is_active,
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


class RoleAssignmentRepository:
    """Persist :class:`UserRoleAssignment` records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, assignment_id: str) -> UserRoleAssignment | None:
        model = self.session.get(RoleAssignmentModel, assignment_id)
        return self._to_entity(model) if model else None

    def find(self, user_id: str, role_id: str) -> UserRoleAssignment | None:
        model = (
            self.session.query(RoleAssignmentModel)
            .filter_by(user_id=user_id, role_id=role_id)
            .first()
        )
        return self._to_entity(model) if model else None

    def list_for_user(self, user_id: str) -> Sequence[UserRoleAssignment]:
        query = (
            self.session.query(RoleAssignmentModel)
            .filter(RoleAssignmentModel.user_id == user_id)
            .order_by(RoleAssignmentModel.assigned_at.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def save(self, assignment: UserRoleAssignment) -> UserRoleAssignment:
        model = self.session.get(RoleAssignmentModel, assignment.id)
        if model is None:
            model = RoleAssignmentModel(id=assignment.id)
        model.user_id = assignment.user_id
        model.role_id = assignment.role_id
        model.assigned_by = assignment.assigned_by
        model.assigned_at = ensure_app_naive_datetime(assignment.assigned_at)
        model.expires_at = ensure_app_naive_datetime(assignment.expires_at)
        model.is_active = assignment.is_active
        model.metadata_ = dict(assignment.metadata)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: RoleAssignmentModel) -> UserRoleAssignment:
        return UserRoleAssignment(
            id=model.id,
            user_id=model.user_id,
            role_id=model.role_id,
            assigned_by=model.assigned_by,
            assigned_at=ensure_app_timezone(model.assigned_at),
            expires_at=ensure_app_timezone(model.expires_at),
            is_active=model.is_active,
            metadata=dict(model.metadata_ or {}),
        )


__all__ = ["RoleAssignmentRepository", "RoleRepository"]
