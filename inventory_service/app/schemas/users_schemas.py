from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from shared.core.schemas import CommonQueryParams
from shared.utils.enums import UserRole
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class UserCreate(EmptyStringModel):
    email: EmailStr
    name: str = Field(..., max_length=255)
    role: UserRole = UserRole.USER
    is_active: Optional[bool] = True
    password: Optional[str] = Field(None, min_length=8)


class UserUpdate(EmptyStringModel):
    name: str = Field(..., max_length=255)
    role: UserRole
    is_active: Optional[bool] = None


class UserOut(BaseModel):
    id: UUID
    org_id: UUID
    email: str
    name: str
    role: str
    is_active: bool
    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    organization_name: Optional[str] = None

    model_config = {"from_attributes": True}


class UserRequest(CommonQueryParams):
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


class UserListResponse(BaseModel):
    # fields a role may not see are dropped, so entries stay loose
    users: List[dict]
    total: int
    page: int
    limit: int


class PermissionOut(BaseModel):
    resource: str
    actions: List[str]


class FieldPermissionOut(BaseModel):
    resource: str
    fields: Dict[str, str]


class RoleOut(BaseModel):
    name: str
    description: str
    permissions: List[PermissionOut]


class UserPermissionsOut(BaseModel):
    user_id: UUID
    role: str
    permissions: List[PermissionOut]
    field_permissions: List[FieldPermissionOut]


class CheckPermissionRequest(EmptyStringModel):
    resource: str
    action: str


class CheckPermissionResponse(BaseModel):
    user_id: UUID
    resource: str
    action: str
    allowed: bool
