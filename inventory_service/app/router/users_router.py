from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, require_self_or_permission, validate_org_access
from shared.core.database import get_db
from shared.core.permissions import filter_fields
from shared.core.schemas import UserToken

from ..crud import users_crud as crud
from ..schemas.users_schemas import (CheckPermissionRequest, CheckPermissionResponse, RoleOut,
                                     UserCreate, UserListResponse, UserPermissionsOut, UserRequest,
                                     UserUpdate)

router = APIRouter(prefix="/api/v1/orgs/{org_id}/users",
                   tags=["users"], dependencies=[Depends(validate_org_access)])

# ---------------- List ----------------


@router.get("", response_model=UserListResponse)
def get_users(
    params: UserRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("users", "read"))
):
    result = crud.get_users(db, current_user.org_id, params)
    result["users"] = [filter_fields(user, current_user.role, "users") for user in result["users"]]
    return result


@router.get("/roles", response_model=List[RoleOut])
def get_roles():
    return crud.get_roles()


@router.get("/{user_id}", response_model=dict)
def get_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("users", "read"))
):
    user = crud.get_user(db, current_user.org_id, user_id)
    return filter_fields(user, current_user.role, "users")

# ---------------- Create / Update / Delete ----------------


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
def create_user(
    user: UserCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("users", "create"))
):
    created = crud.create_user(db, current_user.org_id, current_user.user_id, user)
    return filter_fields(created, current_user.role, "users")


@router.put("/{user_id}", response_model=dict)
def update_user(
    user_id: UUID,
    user: UserUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("users", "update"))
):
    updated = crud.update_user(db, current_user.org_id, current_user.user_id, user_id, user)
    return filter_fields(updated, current_user.role, "users")


@router.delete("/{user_id}")
def delete_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("users", "delete"))
):
    return crud.delete_user(db, current_user.org_id, current_user.user_id, user_id)

# ---------------- Permissions ----------------


@router.get("/{user_id}/permissions", response_model=UserPermissionsOut)
def get_user_permissions(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_self_or_permission("users", "read"))
):
    return crud.get_user_permissions(db, current_user.org_id, user_id)


@router.post("/{user_id}/check-permission", response_model=CheckPermissionResponse)
def check_user_permission(
    user_id: UUID,
    check: CheckPermissionRequest,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_self_or_permission("users", "read"))
):
    return crud.check_user_permission(db, current_user.org_id, user_id, check)
