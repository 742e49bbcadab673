from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, validate_org_access
from shared.core.database import get_db
from shared.core.schemas import UserToken

from ..crud import field_aliases_crud as crud
from ..schemas.field_aliases_schemas import (FieldAliasCreate, FieldAliasListResponse, FieldAliasOut,
                                             FieldAliasRequest, FieldAliasUpdate, SupportedTablesResponse,
                                             TableFieldsResponse)

router = APIRouter(prefix="/api/v1/orgs/{org_id}/field-aliases",
                   tags=["field_aliases"], dependencies=[Depends(validate_org_access)])


@router.get("", response_model=FieldAliasListResponse)
def get_field_aliases(
    params: FieldAliasRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_org_access)
):
    return crud.get_field_aliases(db, current_user.org_id, params)


@router.get("/tables", response_model=SupportedTablesResponse)
def get_supported_tables():
    return {"tables": crud.get_supported_tables()}


@router.get("/tables/{table_name}", response_model=TableFieldsResponse)
def get_table_fields(
    table_name: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_org_access)
):
    return crud.get_table_fields(db, current_user.org_id, table_name)


@router.post("/tables/{table_name}/initialize", response_model=TableFieldsResponse,
             status_code=status.HTTP_201_CREATED)
def initialize_table_fields(
    table_name: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("settings", "update"))
):
    crud.initialize_default_field_aliases(db, current_user.org_id, table_name)
    return crud.get_table_fields(db, current_user.org_id, table_name)

# ---------------- Create / Update / Delete ----------------


@router.post("", response_model=FieldAliasOut, status_code=status.HTTP_201_CREATED)
def create_field_alias(
    alias: FieldAliasCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("settings", "update"))
):
    return crud.create_field_alias(db, current_user.org_id, current_user.user_id, alias)


@router.patch("/{alias_id}", response_model=FieldAliasOut)
def update_field_alias(
    alias_id: UUID,
    alias: FieldAliasUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("settings", "update"))
):
    return crud.update_field_alias(db, current_user.org_id, current_user.user_id, alias_id, alias)


@router.delete("/{alias_id}")
def delete_field_alias(
    alias_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("settings", "update"))
):
    return crud.delete_field_alias(db, current_user.org_id, current_user.user_id, alias_id)
