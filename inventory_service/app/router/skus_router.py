from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, validate_org_access
from shared.core.database import get_db
from shared.core.schemas import UserToken

from ..crud import change_logs_crud, skus_crud as crud
from ..schemas.change_logs_schemas import ChangeLogOut
from ..schemas.skus_schemas import (SkuCreate, SkuListResponse, SkuOut, SkuRequest, SkuStatusUpdate,
                                    SkuUpdate)

router = APIRouter(prefix="/api/v1/orgs/{org_id}/skus",
                   tags=["skus"], dependencies=[Depends(validate_org_access)])

# ---------------- List ----------------


@router.get("", response_model=SkuListResponse)
def get_skus(
    params: SkuRequest = Depends(),
    include_deactivated: Optional[bool] = Query(None, alias="includeDeactivated"),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("skus", "read"))
):
    if include_deactivated is not None:
        params.include_deactivated = include_deactivated
    return crud.get_skus(db, current_user.org_id, params)


@router.get("/{sku_id}", response_model=SkuOut)
def get_sku(
    sku_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("skus", "read"))
):
    return crud.get_sku_by_id(db, current_user.org_id, sku_id)


@router.get("/{sku_id}/change-logs", response_model=List[ChangeLogOut])
def get_sku_change_logs(
    sku_id: UUID,
    last_days: int = Query(30, ge=1),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("logs", "read"))
):
    return change_logs_crud.get_sku_change_logs(db, current_user.org_id, sku_id, last_days)

# ---------------- Create ----------------


@router.post("", response_model=SkuOut, status_code=status.HTTP_201_CREATED)
def create_sku(
    sku: SkuCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("skus", "create"))
):
    return crud.create_sku(db, current_user.org_id, current_user.user_id, sku)

# ---------------- Update ----------------


@router.patch("/{sku_id}", response_model=SkuOut)
def update_sku(
    sku_id: UUID,
    sku: SkuUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("skus", "update"))
):
    return crud.update_sku(db, current_user.org_id, current_user.user_id, sku_id, sku)


@router.patch("/{sku_id}/status", response_model=SkuOut)
def update_sku_status(
    sku_id: UUID,
    payload: SkuStatusUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("skus", "update"))
):
    return crud.set_sku_status(db, current_user.org_id, current_user.user_id, sku_id, payload)
