import logging
from datetime import timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.core.exceptions import InternalError
from shared.models.users import User

from ..core.valuation import StockPosition, apply_transaction
from ..enum.inventory_enum import ChangeType, EntityType
from ..models.inventory import Inventory
from ..models.skus import Sku
from ..models.transactions import InventoryTransaction
from ..schemas.transactions_schemas import TransactionCreate, TransactionRequest, TransactionSummaryRequest
from .change_logs_crud import log_change, start_of_day
from .inventory_crud import find_inventory
from .skus_crud import get_sku_by_id

logger = logging.getLogger(__name__)


def transaction_out(txn: InventoryTransaction, sku: Optional[Sku] = None, created_by_name: Optional[str] = None) -> dict:
    return {
        "id": txn.id,
        "org_id": txn.org_id,
        "sku_id": txn.sku_id,
        "transaction_type": txn.transaction_type,
        "quantity": txn.quantity,
        "unit_cost": txn.unit_cost,
        "total_cost": txn.total_cost,
        "reference_number": txn.reference_number,
        "notes": txn.notes,
        "created_by": txn.created_by,
        "created_at": txn.created_at,
        "updated_at": txn.updated_at,
        "sku_code": sku.sku_code if sku else None,
        "product_name": sku.product_name if sku else None,
        "category": sku.category if sku else None,
        "created_by_name": created_by_name,
    }


def _date_filters(params):
    filters = []
    if params.start_date:
        filters.append(InventoryTransaction.created_at >= start_of_day(params.start_date))
    if params.end_date:
        # end date is inclusive
        filters.append(InventoryTransaction.created_at < start_of_day(params.end_date + timedelta(days=1)))
    return filters

# ----------------- Build Filters for Transactions -----------------


def build_transaction_filters(org_id: UUID, params: TransactionRequest):
    filters = [InventoryTransaction.org_id == org_id]

    if params.transaction_type:
        filters.append(InventoryTransaction.transaction_type == params.transaction_type.value)

    if params.sku_id:
        filters.append(InventoryTransaction.sku_id == params.sku_id)

    if params.category:
        filters.append(Sku.category == params.category)

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(
            or_(
                Sku.sku_code.ilike(search_term),
                Sku.product_name.ilike(search_term),
                InventoryTransaction.reference_number.ilike(search_term),
                InventoryTransaction.notes.ilike(search_term)
            )
        )

    filters.extend(_date_filters(params))
    return filters

# ---------------- List ----------------


def get_transactions(db: Session, org_id: UUID, params: TransactionRequest) -> dict:
    filters = build_transaction_filters(org_id, params)

    base_query = (
        db.query(InventoryTransaction, Sku, User.name)
        .join(Sku, Sku.id == InventoryTransaction.sku_id)
        .outerjoin(User, User.id == InventoryTransaction.created_by)
        .filter(*filters)
    )

    total = base_query.with_entities(func.count(InventoryTransaction.id)).scalar()

    rows = (
        base_query
        .order_by(InventoryTransaction.created_at.desc())
        .offset(params.offset)
        .limit(params.limit)
        .all()
    )

    return {
        "transactions": [transaction_out(txn, sku, name) for txn, sku, name in rows],
        "total": total,
        "page": params.page,
        "limit": params.limit,
    }

# ---------------- Create ----------------


def store_position(db: Session, org_id: UUID, sku_id: UUID, inventory: Optional[Inventory],
                   position: StockPosition) -> Inventory:
    """Write a computed position to the (org, SKU) inventory row, creating it if needed."""
    if inventory is None:
        inventory = Inventory(org_id=org_id, sku_id=sku_id)
        db.add(inventory)
    inventory.apply_position(position)
    db.flush()
    return inventory


def _record_strict(db: Session, org_id: UUID, db_txn: InventoryTransaction,
                   inventory: Optional[Inventory], position: StockPosition):
    try:
        db.add(db_txn)
        store_position(db, org_id, db_txn.sku_id, inventory, position)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to record transaction for SKU %s", db_txn.sku_id)
        raise InternalError("failed to record transaction")


def _record_lenient(db: Session, org_id: UUID, db_txn: InventoryTransaction):
    try:
        db.add(db_txn)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to record transaction for SKU %s", db_txn.sku_id)
        raise InternalError("failed to record transaction")

    # the movement stands even when the stock row cannot follow
    try:
        inventory = find_inventory(db, org_id, db_txn.sku_id, for_update=True)
        position = apply_transaction(StockPosition.from_inventory(inventory), db_txn.transaction_type,
                                     db_txn.quantity, db_txn.unit_cost)
        store_position(db, org_id, db_txn.sku_id, inventory, position)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Inventory update failed after transaction %s was recorded", db_txn.id)


def create_transaction(db: Session, org_id: UUID, user_id: UUID, txn: TransactionCreate) -> dict:
    sku = get_sku_by_id(db, org_id, txn.sku_id)

    inventory = find_inventory(db, org_id, sku.id, for_update=True)
    # raises before anything is written
    position = apply_transaction(StockPosition.from_inventory(inventory), txn.transaction_type,
                                 txn.quantity, txn.unit_cost)

    db_txn = InventoryTransaction(
        org_id=org_id,
        sku_id=sku.id,
        transaction_type=txn.transaction_type.value,
        quantity=txn.quantity,
        unit_cost=txn.unit_cost,
        total_cost=txn.quantity * txn.unit_cost,
        reference_number=txn.reference_number,
        notes=txn.notes,
        created_by=user_id,
    )

    if settings.STRICT_INVENTORY_WRITES:
        _record_strict(db, org_id, db_txn, inventory, position)
    else:
        _record_lenient(db, org_id, db_txn)

    db.refresh(db_txn)

    reason = f"{db_txn.transaction_type.upper()} transaction - {db_txn.quantity} units"
    if db_txn.notes:
        reason = f"{reason}: {db_txn.notes}"

    log_change(db, org_id, user_id, EntityType.TRANSACTION, ChangeType.CREATE,
               entity_id=db_txn.id, sku_id=sku.id,
               new_value=db_txn.quantity, reason=reason,
               metadata={
                   "transaction_type": db_txn.transaction_type,
                   "quantity": db_txn.quantity,
                   "unit_cost": db_txn.unit_cost,
                   "reference_number": db_txn.reference_number,
               })

    db.refresh(db_txn)
    creator_name = db.query(User.name).filter(User.id == user_id).scalar()
    return transaction_out(db_txn, sku, creator_name)

# ---------------- Summary ----------------


def get_transaction_summary(db: Session, org_id: UUID, params: TransactionSummaryRequest) -> dict:
    filters = [InventoryTransaction.org_id == org_id]

    if params.sku_id:
        filters.append(InventoryTransaction.sku_id == params.sku_id)

    if params.category:
        filters.append(Sku.category == params.category)

    filters.extend(_date_filters(params))

    rows = (
        db.query(
            InventoryTransaction.transaction_type,
            func.count(InventoryTransaction.id),
            func.coalesce(func.sum(InventoryTransaction.quantity), 0),
            func.coalesce(func.sum(InventoryTransaction.total_cost), 0.0),
        )
        .join(Sku, Sku.id == InventoryTransaction.sku_id)
        .filter(*filters)
        .group_by(InventoryTransaction.transaction_type)
        .order_by(InventoryTransaction.transaction_type)
        .all()
    )

    return {
        "summary": [
            {
                "transaction_type": transaction_type,
                "count": count,
                "total_quantity": int(total_quantity),
                "total_value": float(total_value),
            }
            for transaction_type, count, total_quantity, total_value in rows
        ]
    }
