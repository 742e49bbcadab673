import logging
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shared.core.exceptions import ConflictError, NotFoundError
from shared.core.permissions import (field_permissions_for_role, get_role, has_permission,
                                     list_roles)
from shared.models.organizations import Organization
from shared.models.users import User

from ..enum.inventory_enum import ChangeType, EntityType
from ..schemas.users_schemas import CheckPermissionRequest, UserCreate, UserRequest, UserUpdate
from .change_logs_crud import log_change

logger = logging.getLogger(__name__)


def user_out(user: User, organization_name: str = None) -> dict:
    return {
        "id": user.id,
        "org_id": user.org_id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "is_active": user.is_active,
        "last_login_at": user.last_login_at,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
        "organization_name": organization_name,
    }

# ----------------- Build Filters for Users -----------------


def build_user_filters(org_id: UUID, params: UserRequest):
    filters = [User.org_id == org_id]

    if params.role:
        filters.append(User.role == params.role.value)

    if params.is_active is not None:
        filters.append(User.is_active.is_(params.is_active))

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(
            or_(
                User.name.ilike(search_term),
                User.email.ilike(search_term)
            )
        )

    return filters

# ---------------- List ----------------


def get_users(db: Session, org_id: UUID, params: UserRequest) -> dict:
    filters = build_user_filters(org_id, params)

    total = db.query(func.count(User.id)).filter(*filters).scalar()

    rows = (
        db.query(User, Organization.name)
        .outerjoin(Organization, Organization.id == User.org_id)
        .filter(*filters)
        .order_by(User.created_at.desc())
        .offset(params.offset)
        .limit(params.limit)
        .all()
    )

    return {
        "users": [user_out(user, org_name) for user, org_name in rows],
        "total": total,
        "page": params.page,
        "limit": params.limit,
    }


def get_user_by_id(db: Session, org_id: UUID, user_id: UUID) -> User:
    user = db.query(User).filter(User.org_id == org_id, User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def get_user(db: Session, org_id: UUID, user_id: UUID) -> dict:
    user = get_user_by_id(db, org_id, user_id)
    return user_out(user, user.organization.name if user.organization else None)

# ---------------- Create ----------------


def create_user(db: Session, org_id: UUID, actor_id: UUID, user: UserCreate) -> dict:
    email = str(user.email)
    existing = db.query(User.id).filter(User.org_id == org_id, User.email == email).first()
    if existing:
        raise ConflictError(f"A user with email '{email}' already exists")

    db_user = User(
        org_id=org_id,
        email=email,
        name=user.name,
        role=user.role.value,
        is_active=True if user.is_active is None else user.is_active,
    )
    if user.password:
        db_user.set_password(user.password)

    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"A user with email '{email}' already exists")
    db.refresh(db_user)

    log_change(db, org_id, actor_id, EntityType.USER, ChangeType.CREATE,
               entity_id=db_user.id, new_value=db_user.email,
               metadata={"role": db_user.role})

    return get_user(db, org_id, db_user.id)

# ---------------- Update ----------------


def update_user(db: Session, org_id: UUID, actor_id: UUID, user_id: UUID, user: UserUpdate) -> dict:
    db_user = get_user_by_id(db, org_id, user_id)

    update_data = {"name": user.name, "role": user.role.value}
    if user.is_active is not None:
        update_data["is_active"] = user.is_active

    changes = []
    for key, value in update_data.items():
        old_value = getattr(db_user, key)
        if old_value != value:
            changes.append((key, old_value, value))
            setattr(db_user, key, value)

    if changes:
        db.commit()
        db.refresh(db_user)

    for field_name, old_value, new_value in changes:
        log_change(db, org_id, actor_id, EntityType.USER, ChangeType.UPDATE,
                   entity_id=db_user.id, field_name=field_name,
                   old_value=old_value, new_value=new_value)

    return get_user(db, org_id, user_id)

# ---------------- Delete ----------------


def delete_user(db: Session, org_id: UUID, actor_id: UUID, user_id: UUID):
    db_user = get_user_by_id(db, org_id, user_id)
    email = db_user.email

    db.delete(db_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("User is still referenced and cannot be deleted")

    log_change(db, org_id, actor_id, EntityType.USER, ChangeType.DELETE,
               entity_id=user_id, old_value=email)

    return {"message": "User deleted successfully"}

# ---------------- Roles & Permissions ----------------


def get_roles():
    return list_roles()


def get_user_permissions(db: Session, org_id: UUID, user_id: UUID) -> dict:
    user = get_user_by_id(db, org_id, user_id)
    role = get_role(user.role)

    return {
        "user_id": user.id,
        "role": user.role,
        "permissions": role["permissions"] if role else [],
        "field_permissions": field_permissions_for_role(user.role),
    }


def check_user_permission(db: Session, org_id: UUID, user_id: UUID, check: CheckPermissionRequest) -> dict:
    user = get_user_by_id(db, org_id, user_id)

    return {
        "user_id": user.id,
        "resource": check.resource,
        "action": check.action,
        "allowed": has_permission(user.role, check.resource, check.action),
    }
