from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from shared.core.config import settings
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class ChangeLogCreate(EmptyStringModel):
    entity_type: str
    entity_id: Optional[UUID] = None
    sku_id: Optional[UUID] = None
    change_type: str
    field_name: Optional[str] = Field(None, max_length=100)
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    reason: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class ChangeLogOut(BaseModel):
    id: UUID
    org_id: UUID
    user_id: UUID
    user_name: Optional[str] = None
    entity_type: str
    entity_id: Optional[UUID] = None
    sku_id: Optional[UUID] = None
    sku_code: Optional[str] = None
    sku_name: Optional[str] = None
    change_type: str
    field_name: Optional[str] = None
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    reason: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    created_at: datetime


class ChangeLogRequest(EmptyStringModel):
    entity_type: Optional[str] = None
    entity_id: Optional[UUID] = None
    sku_id: Optional[UUID] = None
    user_id: Optional[UUID] = None
    change_type: Optional[str] = None
    last_days: Optional[int] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    limit: Optional[int] = None
    offset: Optional[int] = 0

    @field_validator("last_days", mode="before")
    @classmethod
    def drop_invalid_window(cls, value):
        if value is None or int(value) < 1:
            return None
        return int(value)

    @field_validator("offset", mode="before")
    @classmethod
    def clamp_offset(cls, value):
        if value is None or int(value) < 0:
            return 0
        return int(value)

    @field_validator("limit", mode="before")
    @classmethod
    def clamp_limit(cls, value):
        if value is None:
            return settings.DEFAULT_PAGE_LIMIT
        value = int(value)
        if value < 1:
            return settings.DEFAULT_PAGE_LIMIT
        return min(value, settings.MAX_PAGE_LIMIT)


class ChangeLogListResponse(BaseModel):
    logs: List[ChangeLogOut]
    total: int


class TopUser(BaseModel):
    user_id: UUID
    user_name: Optional[str] = None
    changes: int


class ActivitySummaryOut(BaseModel):
    total_changes: int
    recent_changes: int
    changes_by_type: Dict[str, int]
    top_users: List[TopUser]
    recent_activity: List[ChangeLogOut]
