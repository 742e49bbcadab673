import logging
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shared.core.exceptions import ConflictError, NotFoundError

from ..enum.inventory_enum import ChangeType, EntityType
from ..models.skus import Sku
from ..schemas.skus_schemas import SkuCreate, SkuRequest, SkuStatusUpdate, SkuUpdate
from .change_logs_crud import log_change

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("product_name", "description", "category", "supplier", "barcode")

# ----------------- Build Filters for SKUs -----------------


def build_sku_filters(org_id: UUID, params: SkuRequest):
    filters = [Sku.org_id == org_id]

    if not params.include_deactivated:
        filters.append(Sku.is_active.is_(True))

    if params.category:
        filters.append(Sku.category == params.category)

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(
            or_(
                Sku.sku_code.ilike(search_term),
                Sku.product_name.ilike(search_term),
                Sku.description.ilike(search_term)
            )
        )

    return filters

# ---------------- List ----------------


def get_skus(db: Session, org_id: UUID, params: SkuRequest) -> dict:
    filters = build_sku_filters(org_id, params)

    total = db.query(func.count(Sku.id)).filter(*filters).scalar()

    skus = (
        db.query(Sku)
        .filter(*filters)
        .order_by(Sku.created_at.desc())
        .offset(params.offset)
        .limit(params.limit)
        .all()
    )

    return {"skus": skus, "total": total, "page": params.page, "limit": params.limit}


def get_sku_by_id(db: Session, org_id: UUID, sku_id: UUID) -> Sku:
    sku = db.query(Sku).filter(Sku.org_id == org_id, Sku.id == sku_id).first()
    if not sku:
        raise NotFoundError("SKU not found")
    return sku

# ---------------- Create ----------------


def create_sku(db: Session, org_id: UUID, user_id: UUID, sku: SkuCreate) -> Sku:
    existing = db.query(Sku.id).filter(
        Sku.org_id == org_id, Sku.sku_code == sku.sku_code).first()
    if existing:
        raise ConflictError(f"SKU code '{sku.sku_code}' already exists")

    db_sku = Sku(org_id=org_id, is_active=True, **sku.model_dump())
    db.add(db_sku)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"SKU code '{sku.sku_code}' already exists")
    db.refresh(db_sku)

    log_change(db, org_id, user_id, EntityType.SKU, ChangeType.CREATE,
               entity_id=db_sku.id, sku_id=db_sku.id,
               new_value=db_sku.sku_code,
               reason=f"Created SKU {db_sku.sku_code}")
    db.refresh(db_sku)
    return db_sku

# ---------------- Update ----------------


def update_sku(db: Session, org_id: UUID, user_id: UUID, sku_id: UUID, sku: SkuUpdate) -> Sku:
    db_sku = get_sku_by_id(db, org_id, sku_id)

    # product_name is always supplied; the rest only when sent
    update_data = sku.model_dump(exclude_unset=True)
    update_data["product_name"] = sku.product_name

    changes = []
    for key in UPDATABLE_FIELDS:
        if key not in update_data:
            continue
        old_value = getattr(db_sku, key)
        if old_value != update_data[key]:
            changes.append((key, old_value, update_data[key]))
            setattr(db_sku, key, update_data[key])

    if changes:
        db.commit()
        db.refresh(db_sku)

    for field_name, old_value, new_value in changes:
        log_change(db, org_id, user_id, EntityType.SKU, ChangeType.UPDATE,
                   entity_id=db_sku.id, sku_id=db_sku.id, field_name=field_name,
                   old_value=old_value, new_value=new_value)

    db.refresh(db_sku)
    return db_sku


def set_sku_status(db: Session, org_id: UUID, user_id: UUID, sku_id: UUID, status: SkuStatusUpdate) -> Sku:
    db_sku = get_sku_by_id(db, org_id, sku_id)

    old_value = db_sku.is_active
    db_sku.is_active = status.is_active
    db.commit()
    db.refresh(db_sku)

    change_type = ChangeType.ACTIVATE if status.is_active else ChangeType.DEACTIVATE
    log_change(db, org_id, user_id, EntityType.SKU, change_type,
               entity_id=db_sku.id, sku_id=db_sku.id, field_name="is_active",
               old_value=old_value, new_value=status.is_active)

    db.refresh(db_sku)
    return db_sku
