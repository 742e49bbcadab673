from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, validate_org_access
from shared.core.database import get_db
from shared.core.schemas import UserToken

from ..crud import transactions_crud as crud
from ..schemas.transactions_schemas import (TransactionCreate, TransactionListResponse, TransactionOut,
                                            TransactionRequest, TransactionSummaryRequest,
                                            TransactionSummaryResponse)

router = APIRouter(prefix="/api/v1/orgs/{org_id}/transactions",
                   tags=["transactions"], dependencies=[Depends(validate_org_access)])


@router.get("", response_model=TransactionListResponse)
def get_transactions(
    params: TransactionRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("transactions", "read"))
):
    return crud.get_transactions(db, current_user.org_id, params)


@router.get("/summary", response_model=TransactionSummaryResponse)
def get_transaction_summary(
    params: TransactionSummaryRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("transactions", "read"))
):
    return crud.get_transaction_summary(db, current_user.org_id, params)


@router.post("", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
def create_transaction(
    txn: TransactionCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("transactions", "create"))
):
    return crud.create_transaction(db, current_user.org_id, current_user.user_id, txn)
