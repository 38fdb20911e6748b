"""Endpoints exposing user accounts, profiles and activity."""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from notifyhub.application.use_cases.users import (
    get_user_profile,
    list_user_activity,
    list_user_roles,
    update_user_profile,
)
from notifyhub.domain.entities import User
from notifyhub.infrastructure.database import get_db
from notifyhub.interfaces.api.dependencies import get_current_active_user
from notifyhub.interfaces.api.routes_helpers import ensure_self_or_admin, unwrap
from notifyhub.interfaces.api.schemas import (
    ProfileUpdateResult,
    RoleRead,
    UserActivityRead,
    UserProfileDetail,
    UserProfileRead,
    UserProfileUpdate,
    UserRead,
)

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)


@router.get("/me", response_model=UserRead)
def read_current_user(current_user: User = Depends(get_current_active_user)):
    return UserRead.model_validate(current_user)


@router.put("/me/profile", response_model=ProfileUpdateResult)
def update_my_profile(
    payload: UserProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ProfileUpdateResult:
    """Change the fields present in the body of the caller's profile."""

    profile = unwrap(
        update_user_profile(
            db,
            current_user.id,
            payload.model_dump(exclude_unset=True),
            performed_by=current_user.id,
        )
    )
    return ProfileUpdateResult(
        message="Profile updated successfully",
        profile=UserProfileRead.model_validate(profile),
    )


@router.get("/{user_id}/profile", response_model=UserProfileDetail)
def read_user_profile(
    user_id: str,
    include_roles: bool = False,
    include_activity: bool = False,
    activity_limit: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> UserProfileDetail:
    """Return a user's profile; activity is only shown to the owner and admins."""

    if include_activity:
        ensure_self_or_admin(current_user, user_id)
    view = unwrap(
        get_user_profile(
            db,
            user_id,
            viewer_id=current_user.id,
            include_roles=include_roles,
            include_activity=include_activity,
            activity_limit=activity_limit,
        )
    )
    return UserProfileDetail(
        user=UserRead.model_validate(view.user),
        profile=UserProfileRead.model_validate(view.profile),
        display_name=view.profile.get_display_name(),
        roles=[RoleRead.model_validate(role) for role in view.roles],
        recent_activity=[UserActivityRead.model_validate(a) for a in view.recent_activity],
    )


@router.get("/{user_id}/activity", response_model=list[UserActivityRead])
def read_user_activity(
    user_id: str,
    limit: int | None = Query(default=None, ge=1),
    type: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[UserActivityRead]:
    ensure_self_or_admin(current_user, user_id)
    activities = unwrap(list_user_activity(db, user_id, limit=limit, type=type))
    return [UserActivityRead.model_validate(activity) for activity in activities]


@router.get("/{user_id}/roles", response_model=list[RoleRead])
def read_user_roles(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[RoleRead]:
    """Return the roles bound to the user through valid assignments."""

    ensure_self_or_admin(current_user, user_id)
    return [RoleRead.model_validate(role) for role in unwrap(list_user_roles(db, user_id))]
