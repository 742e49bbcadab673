from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class InventoryCreate(EmptyStringModel):
    sku_id: UUID
    quantity: int = Field(0, ge=0)
    weighted_cost: float = Field(0.0, ge=0)


class InventoryCostUpdate(EmptyStringModel):
    weighted_cost: float = Field(..., ge=0)
    reason: Optional[str] = None


class InventoryOut(BaseModel):
    id: UUID
    org_id: UUID
    sku_id: UUID
    quantity: int
    weighted_cost: float
    total_value: float
    is_manual_cost: bool
    created_at: datetime
    updated_at: datetime
    sku_code: Optional[str] = None
    product_name: Optional[str] = None
    category: Optional[str] = None

    model_config = {"from_attributes": True}


class InventoryRequest(CommonQueryParams):
    category: Optional[str] = None


class InventoryListResponse(BaseModel):
    inventory: List[InventoryOut]
    total: int
    page: int
    limit: int
