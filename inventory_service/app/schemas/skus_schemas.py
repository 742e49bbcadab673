from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class SkuBase(EmptyStringModel):
    product_name: str = Field(..., max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    supplier: Optional[str] = Field(None, max_length=255)
    barcode: Optional[str] = Field(None, max_length=50)


class SkuCreate(SkuBase):
    sku_code: str = Field(..., max_length=50)


class SkuUpdate(SkuBase):
    pass


class SkuStatusUpdate(BaseModel):
    is_active: bool


class SkuOut(BaseModel):
    id: UUID
    org_id: UUID
    sku_code: str
    product_name: str
    description: Optional[str] = None
    category: Optional[str] = None
    supplier: Optional[str] = None
    barcode: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SkuRequest(CommonQueryParams):
    category: Optional[str] = None
    include_deactivated: Optional[bool] = False


class SkuListResponse(BaseModel):
    skus: List[SkuOut]
    total: int
    page: int
    limit: int
