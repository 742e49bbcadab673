from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, validate_org_access
from shared.core.database import get_db
from shared.core.schemas import UserToken

from ..crud import inventory_crud as crud
from ..schemas.inventory_schemas import (InventoryCostUpdate, InventoryCreate, InventoryListResponse,
                                         InventoryOut, InventoryRequest)

router = APIRouter(prefix="/api/v1/orgs/{org_id}/inventory",
                   tags=["inventory"], dependencies=[Depends(validate_org_access)])


@router.get("", response_model=InventoryListResponse)
def get_inventory(
    params: InventoryRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("inventory", "read"))
):
    return crud.get_inventory(db, current_user.org_id, params)


@router.post("", response_model=InventoryOut, status_code=status.HTTP_201_CREATED)
def create_inventory(
    item: InventoryCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("inventory", "create"))
):
    return crud.create_inventory(db, current_user.org_id, current_user.user_id, item)


@router.get("/sku/{sku_id}", response_model=InventoryOut)
def get_inventory_by_sku(
    sku_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("inventory", "read"))
):
    return crud.get_inventory_by_sku(db, current_user.org_id, sku_id)

# ---------------- Manual Cost ----------------


@router.patch("/sku/{sku_id}/cost", response_model=InventoryOut)
def update_manual_cost(
    sku_id: UUID,
    cost: InventoryCostUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("inventory", "update"))
):
    return crud.update_manual_cost(db, current_user.org_id, current_user.user_id, sku_id, cost)
