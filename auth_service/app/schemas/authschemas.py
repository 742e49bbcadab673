from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr

from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class LoginRequest(EmptyStringModel):
    email: EmailStr
    password: str
    # only needed when the same email exists in several organizations
    org_id: Optional[UUID] = None


class OrganizationOut(BaseModel):
    id: UUID
    name: str

    model_config = {"from_attributes": True}


class AuthUserOut(BaseModel):
    id: UUID
    org_id: UUID
    email: str
    name: str
    role: str
    is_active: bool
    last_login_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AuthenticationResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: AuthUserOut
    organization: OrganizationOut


class MeResponse(BaseModel):
    user: AuthUserOut
    organization: OrganizationOut
