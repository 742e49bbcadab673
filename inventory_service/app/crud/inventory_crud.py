import logging
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shared.core.exceptions import ConflictError, NotFoundError

from ..core.valuation import StockPosition, apply_manual_cost
from ..enum.inventory_enum import ChangeType, EntityType
from ..models.inventory import Inventory
from ..models.skus import Sku
from ..schemas.inventory_schemas import InventoryCostUpdate, InventoryCreate, InventoryRequest
from .change_logs_crud import log_change
from .skus_crud import get_sku_by_id

logger = logging.getLogger(__name__)


def inventory_out(inventory: Inventory, sku: Sku = None) -> dict:
    sku = sku or inventory.sku
    return {
        "id": inventory.id,
        "org_id": inventory.org_id,
        "sku_id": inventory.sku_id,
        "quantity": inventory.quantity,
        "weighted_cost": inventory.weighted_cost,
        "total_value": inventory.total_value,
        "is_manual_cost": inventory.is_manual_cost,
        "created_at": inventory.created_at,
        "updated_at": inventory.updated_at,
        "sku_code": sku.sku_code if sku else None,
        "product_name": sku.product_name if sku else None,
        "category": sku.category if sku else None,
    }

# ----------------- Build Filters for Inventory -----------------


def build_inventory_filters(org_id: UUID, params: InventoryRequest):
    filters = [Inventory.org_id == org_id, Sku.is_active.is_(True)]

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


def get_inventory(db: Session, org_id: UUID, params: InventoryRequest) -> dict:
    filters = build_inventory_filters(org_id, params)

    base_query = db.query(Inventory, Sku).join(Sku, Sku.id == Inventory.sku_id).filter(*filters)

    total = base_query.with_entities(func.count(Inventory.id)).scalar()

    rows = (
        base_query
        .order_by(Inventory.updated_at.desc())
        .offset(params.offset)
        .limit(params.limit)
        .all()
    )

    return {
        "inventory": [inventory_out(inventory, sku) for inventory, sku in rows],
        "total": total,
        "page": params.page,
        "limit": params.limit,
    }


def find_inventory(db: Session, org_id: UUID, sku_id: UUID, for_update: bool = False):
    query = db.query(Inventory).filter(Inventory.org_id == org_id, Inventory.sku_id == sku_id)
    if for_update:
        # row lock held until the surrounding transaction ends
        query = query.with_for_update()
    return query.first()


def get_inventory_by_sku(db: Session, org_id: UUID, sku_id: UUID) -> dict:
    inventory = find_inventory(db, org_id, sku_id)
    if not inventory:
        raise NotFoundError("Inventory not found for this SKU")
    return inventory_out(inventory)

# ---------------- Create ----------------


def create_inventory(db: Session, org_id: UUID, user_id: UUID, item: InventoryCreate) -> dict:
    sku = get_sku_by_id(db, org_id, item.sku_id)

    if find_inventory(db, org_id, sku.id):
        raise ConflictError("Inventory already exists for this SKU")

    db_inventory = Inventory(
        org_id=org_id,
        sku_id=sku.id,
        quantity=item.quantity,
        weighted_cost=item.weighted_cost,
        total_value=item.quantity * item.weighted_cost,
        is_manual_cost=False,
    )
    db.add(db_inventory)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Inventory already exists for this SKU")
    db.refresh(db_inventory)

    log_change(db, org_id, user_id, EntityType.INVENTORY, ChangeType.CREATE,
               entity_id=db_inventory.id, sku_id=sku.id,
               new_value=db_inventory.quantity,
               metadata={"quantity": db_inventory.quantity,
                         "weighted_cost": db_inventory.weighted_cost})

    db.refresh(db_inventory)
    return inventory_out(db_inventory)

# ---------------- Manual Cost ----------------


def update_manual_cost(db: Session, org_id: UUID, user_id: UUID, sku_id: UUID,
                       cost: InventoryCostUpdate) -> dict:
    inventory = find_inventory(db, org_id, sku_id, for_update=True)
    if not inventory:
        raise NotFoundError("Inventory not found for this SKU")

    old_cost = inventory.weighted_cost
    position = apply_manual_cost(StockPosition.from_inventory(inventory), cost.weighted_cost)
    inventory.apply_position(position)
    db.commit()
    db.refresh(inventory)

    log_change(db, org_id, user_id, EntityType.INVENTORY, ChangeType.MANUAL_COST_UPDATE,
               entity_id=inventory.id, sku_id=sku_id, field_name="weighted_cost",
               old_value=old_cost, new_value=inventory.weighted_cost,
               reason=cost.reason)

    db.refresh(inventory)
    return inventory_out(inventory)
