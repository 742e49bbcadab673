import logging
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.core.exceptions import ConflictError, InvalidArgumentError, NotFoundError

from ..enum.inventory_enum import ChangeType, EntityType, SupportedTable
from ..models.field_aliases import DEFAULT_TABLE_FIELDS, FieldAlias
from ..schemas.field_aliases_schemas import FieldAliasCreate, FieldAliasRequest, FieldAliasUpdate
from .change_logs_crud import log_change

logger = logging.getLogger(__name__)


def get_supported_tables():
    return [table.value for table in SupportedTable]


def validate_table_name(table_name: str) -> str:
    if table_name not in get_supported_tables():
        raise InvalidArgumentError(
            f"unsupported table: {table_name}; must be one of {get_supported_tables()}")
    return table_name

# ---------------- List ----------------


def get_field_aliases(db: Session, org_id: UUID, params: FieldAliasRequest) -> dict:
    filters = [FieldAlias.org_id == org_id]

    if params.table_name:
        filters.append(FieldAlias.table_name == params.table_name)

    if params.is_hidden is not None:
        filters.append(FieldAlias.is_hidden.is_(params.is_hidden))

    total = db.query(func.count(FieldAlias.id)).filter(*filters).scalar()

    query = (
        db.query(FieldAlias)
        .filter(*filters)
        .order_by(FieldAlias.table_name, FieldAlias.sort_order, FieldAlias.field_name)
        .offset(params.offset)
    )
    if params.limit:
        query = query.limit(min(params.limit, settings.MAX_PAGE_LIMIT))

    return {"aliases": query.all(), "total": total}


def get_field_alias_by_id(db: Session, org_id: UUID, alias_id: UUID) -> FieldAlias:
    alias = db.query(FieldAlias).filter(
        FieldAlias.org_id == org_id, FieldAlias.id == alias_id).first()
    if not alias:
        raise NotFoundError("Field alias not found")
    return alias

# ---------------- Create ----------------


def create_field_alias(db: Session, org_id: UUID, user_id: UUID, alias: FieldAliasCreate) -> FieldAlias:
    validate_table_name(alias.table_name)

    existing = db.query(FieldAlias.id).filter(
        FieldAlias.org_id == org_id,
        FieldAlias.table_name == alias.table_name,
        FieldAlias.field_name == alias.field_name
    ).first()
    if existing:
        raise ConflictError(
            f"Field alias for {alias.table_name}.{alias.field_name} already exists")

    db_alias = FieldAlias(
        org_id=org_id,
        table_name=alias.table_name,
        field_name=alias.field_name,
        display_name=alias.display_name,
        description=alias.description,
        is_hidden=bool(alias.is_hidden),
        sort_order=alias.sort_order or 0,
    )
    db.add(db_alias)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(
            f"Field alias for {alias.table_name}.{alias.field_name} already exists")
    db.refresh(db_alias)

    log_change(db, org_id, user_id, EntityType.FIELD_ALIAS, ChangeType.CREATE,
               entity_id=db_alias.id, field_name=db_alias.field_name,
               new_value=db_alias.display_name,
               metadata={"table_name": db_alias.table_name})

    db.refresh(db_alias)
    return db_alias

# ---------------- Update ----------------


def update_field_alias(db: Session, org_id: UUID, user_id: UUID, alias_id: UUID,
                       alias: FieldAliasUpdate) -> FieldAlias:
    db_alias = get_field_alias_by_id(db, org_id, alias_id)

    update_data = alias.model_dump(exclude_unset=True)
    if "display_name" in update_data and not update_data["display_name"]:
        raise InvalidArgumentError("display_name cannot be empty")
    for key in ("is_hidden", "sort_order"):
        if key in update_data and update_data[key] is None:
            update_data.pop(key)

    changes = []
    for key, value in update_data.items():
        old_value = getattr(db_alias, key)
        if old_value != value:
            changes.append((key, old_value, value))
            setattr(db_alias, key, value)

    if changes:
        db.commit()
        db.refresh(db_alias)

    for field_name, old_value, new_value in changes:
        log_change(db, org_id, user_id, EntityType.FIELD_ALIAS, ChangeType.UPDATE,
                   entity_id=db_alias.id, field_name=field_name,
                   old_value=old_value, new_value=new_value,
                   metadata={"table_name": db_alias.table_name,
                             "alias_field": db_alias.field_name})

    db.refresh(db_alias)
    return db_alias

# ---------------- Delete ----------------


def delete_field_alias(db: Session, org_id: UUID, user_id: UUID, alias_id: UUID):
    db_alias = get_field_alias_by_id(db, org_id, alias_id)
    table_name, field_name = db_alias.table_name, db_alias.field_name

    db.delete(db_alias)
    db.commit()

    log_change(db, org_id, user_id, EntityType.FIELD_ALIAS, ChangeType.DELETE,
               entity_id=alias_id, field_name=field_name,
               metadata={"table_name": table_name})

    return {"message": "Field alias deleted successfully"}

# ---------------- Table Fields ----------------


def initialize_default_field_aliases(db: Session, org_id: UUID, table_name: str) -> int:
    """Seed the default aliases for a table that has none; returns how many were added."""
    validate_table_name(table_name)

    existing = db.query(FieldAlias.id).filter(
        FieldAlias.org_id == org_id, FieldAlias.table_name == table_name).first()
    if existing:
        return 0

    for field_name, display_name, description, sort_order in DEFAULT_TABLE_FIELDS[table_name]:
        db.add(FieldAlias(
            org_id=org_id,
            table_name=table_name,
            field_name=field_name,
            display_name=display_name,
            description=description,
            is_hidden=False,
            sort_order=sort_order,
        ))

    try:
        db.commit()
    except IntegrityError:
        # a concurrent request seeded the same rows
        db.rollback()
        return 0

    return len(DEFAULT_TABLE_FIELDS[table_name])


def get_table_fields(db: Session, org_id: UUID, table_name: str) -> dict:
    validate_table_name(table_name)

    def load():
        return (
            db.query(FieldAlias)
            .filter(FieldAlias.org_id == org_id, FieldAlias.table_name == table_name)
            .order_by(FieldAlias.sort_order, FieldAlias.field_name)
            .all()
        )

    aliases = load()
    if not aliases:
        initialize_default_field_aliases(db, org_id, table_name)
        aliases = load()

    defaults = {field_name: display_name
                for field_name, display_name, _, _ in DEFAULT_TABLE_FIELDS[table_name]}

    return {
        "table_name": table_name,
        "fields": aliases,
        "metadata": {
            "total_fields": len(aliases),
            "hidden_fields": sum(1 for alias in aliases if alias.is_hidden),
            "custom_aliases": sum(
                1 for alias in aliases
                if alias.field_name in defaults and alias.display_name != defaults[alias.field_name]
            ),
            "last_updated": max((alias.updated_at for alias in aliases), default=None),
        },
    }
