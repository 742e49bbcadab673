from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from shared.core.config import settings
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class UserToken(BaseModel):
    user_id: UUID
    org_id: UUID
    email: str
    role: str
    name: Optional[str] = None
    exp: Optional[int] = None


class CommonQueryParams(EmptyStringModel):
    search: Optional[str] = None
    page: Optional[int] = 1
    limit: Optional[int] = None

    @field_validator("page", mode="before")
    @classmethod
    def clamp_page(cls, value):
        if value is None:
            return 1
        value = int(value)
        return value if value >= 1 else 1

    @field_validator("limit", mode="before")
    @classmethod
    def clamp_limit(cls, value):
        if value is None:
            return settings.DEFAULT_PAGE_LIMIT
        value = int(value)
        if value < 1:
            return settings.DEFAULT_PAGE_LIMIT
        return min(value, settings.MAX_PAGE_LIMIT)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class Lookup(BaseModel):
    id: UUID
    name: str

    model_config = {"from_attributes": True}
