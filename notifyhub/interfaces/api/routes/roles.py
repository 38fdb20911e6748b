"""Administrative endpoints for roles and role assignments."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from notifyhub.application.use_cases.users import (
    activate_role,
    assign_role,
    create_role,
    deactivate_role,
    delete_role,
    get_role,
    list_roles,
    revoke_role_assignment,
    update_role,
)
from notifyhub.domain.entities import User
from notifyhub.infrastructure.database import get_db
from notifyhub.interfaces.api.dependencies import require_admin
from notifyhub.interfaces.api.routes_helpers import unwrap
from notifyhub.interfaces.api.schemas import (
    RoleAssignmentCreate,
    RoleAssignmentRead,
    RoleCreate,
    RoleRead,
    RoleUpdate,
)

router = APIRouter(prefix="/roles", tags=["roles"])


@router.get("/", response_model=list[RoleRead])
def read_roles(
    include_inactive: bool = True,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> list[RoleRead]:
    roles = unwrap(list_roles(db, include_inactive=include_inactive))
    return [RoleRead.model_validate(role) for role in roles]


@router.post("/", response_model=RoleRead, status_code=status.HTTP_201_CREATED)
def register_role(
    payload: RoleCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> RoleRead:
    return RoleRead.model_validate(unwrap(create_role(db, **payload.model_dump())))


@router.delete("/assignments/{assignment_id}", response_model=RoleAssignmentRead)
def revoke_assignment(
    assignment_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> RoleAssignmentRead:
    assignment = unwrap(revoke_role_assignment(db, assignment_id, revoked_by=current_user.id))
    return RoleAssignmentRead.model_validate(assignment)


@router.get("/{role_id}", response_model=RoleRead)
def read_role(
    role_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> RoleRead:
    return RoleRead.model_validate(unwrap(get_role(db, role_id)))


@router.put("/{role_id}", response_model=RoleRead)
def modify_role(
    role_id: str,
    payload: RoleUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> RoleRead:
    return RoleRead.model_validate(unwrap(update_role(db, role_id, **payload.model_dump())))


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_role(
    role_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> None:
    unwrap(delete_role(db, role_id))


@router.post("/{role_id}/activate", response_model=RoleRead)
def enable_role(
    role_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> RoleRead:
    return RoleRead.model_validate(unwrap(activate_role(db, role_id)))


@router.post("/{role_id}/deactivate", response_model=RoleRead)
def disable_role(
    role_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> RoleRead:
    return RoleRead.model_validate(unwrap(deactivate_role(db, role_id)))


@router.post(
    "/{role_id}/assignments",
    response_model=RoleAssignmentRead,
    status_code=status.HTTP_201_CREATED,
)
def grant_role(
    role_id: str,
    payload: RoleAssignmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> RoleAssignmentRead:
    assignment = unwrap(
        assign_role(
            db,
            user_id=payload.user_id,
            role_id=role_id,
            assigned_by=current_user.id,
            expires_at=payload.expires_at,
        )
    )
    return RoleAssignmentRead.model_validate(assignment)
