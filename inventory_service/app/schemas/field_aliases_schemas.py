from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class FieldAliasCreate(EmptyStringModel):
    table_name: str = Field(..., max_length=100)
    field_name: str = Field(..., max_length=100)
    display_name: str = Field(..., max_length=255)
    description: Optional[str] = None
    is_hidden: Optional[bool] = False
    sort_order: Optional[int] = 0


class FieldAliasUpdate(EmptyStringModel):
    display_name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    is_hidden: Optional[bool] = None
    sort_order: Optional[int] = None


class FieldAliasOut(BaseModel):
    id: UUID
    org_id: UUID
    table_name: str
    field_name: str
    display_name: str
    description: Optional[str] = None
    is_hidden: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class FieldAliasRequest(EmptyStringModel):
    table_name: Optional[str] = None
    is_hidden: Optional[bool] = None
    limit: Optional[int] = None
    offset: Optional[int] = 0

    @field_validator("offset", mode="before")
    @classmethod
    def clamp_offset(cls, value):
        if value is None or int(value) < 0:
            return 0
        return int(value)


class FieldAliasListResponse(BaseModel):
    aliases: List[FieldAliasOut]
    total: int


class TableFieldsMetadata(BaseModel):
    total_fields: int
    hidden_fields: int
    custom_aliases: int
    last_updated: Optional[datetime] = None


class TableFieldsResponse(BaseModel):
    table_name: str
    fields: List[FieldAliasOut]
    metadata: TableFieldsMetadata


class SupportedTablesResponse(BaseModel):
    tables: List[str]
