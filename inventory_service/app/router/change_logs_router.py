from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, validate_org_access
from shared.core.database import get_db
from shared.core.schemas import UserToken

from ..crud import change_logs_crud as crud
from ..schemas.change_logs_schemas import (ActivitySummaryOut, ChangeLogCreate, ChangeLogListResponse,
                                           ChangeLogOut, ChangeLogRequest)

router = APIRouter(prefix="/api/v1/orgs/{org_id}",
                   tags=["change_logs"], dependencies=[Depends(validate_org_access)])


@router.get("/change-logs", response_model=ChangeLogListResponse)
def get_change_logs(
    params: ChangeLogRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("logs", "read"))
):
    return crud.get_change_logs(db, current_user.org_id, params)


@router.post("/change-logs", response_model=ChangeLogOut, status_code=status.HTTP_201_CREATED)
def create_change_log(
    entry: ChangeLogCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("logs", "create"))
):
    log = crud.record_change(db, current_user.org_id, current_user.user_id, entry)
    return crud.get_change_log_by_id(db, current_user.org_id, log.id)


@router.get("/activity-summary", response_model=ActivitySummaryOut)
def get_activity_summary(
    last_days: int = Query(30, ge=1),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("logs", "read"))
):
    return crud.get_activity_summary(db, current_user.org_id, last_days)
