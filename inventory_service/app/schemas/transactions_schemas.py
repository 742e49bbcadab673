from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

from ..enum.inventory_enum import TransactionType


class TransactionCreate(EmptyStringModel):
    sku_id: UUID
    transaction_type: TransactionType
    quantity: int = Field(..., gt=0)
    unit_cost: float = Field(..., ge=0)
    reference_number: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None


class TransactionOut(BaseModel):
    id: UUID
    org_id: UUID
    sku_id: UUID
    transaction_type: TransactionType
    quantity: int
    unit_cost: float
    total_cost: float
    reference_number: Optional[str] = None
    notes: Optional[str] = None
    created_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime
    sku_code: Optional[str] = None
    product_name: Optional[str] = None
    category: Optional[str] = None
    created_by_name: Optional[str] = None

    model_config = {"from_attributes": True}


class TransactionRequest(CommonQueryParams):
    transaction_type: Optional[TransactionType] = None
    sku_id: Optional[UUID] = None
    category: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class TransactionSummaryRequest(EmptyStringModel):
    sku_id: Optional[UUID] = None
    category: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class TransactionListResponse(BaseModel):
    transactions: List[TransactionOut]
    total: int
    page: int
    limit: int


class TransactionSummaryItem(BaseModel):
    transaction_type: TransactionType
    count: int
    total_quantity: int
    total_value: float


class TransactionSummaryResponse(BaseModel):
    summary: List[TransactionSummaryItem]
