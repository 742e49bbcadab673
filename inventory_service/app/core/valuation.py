"""Weighted average cost valuation.

Every stock movement produces a new :class:`StockPosition`; positions are
never mutated in place. Arithmetic is plain float with no rounding.
"""
from dataclasses import dataclass, replace
from typing import Optional

from shared.core.exceptions import InsufficientInventoryError, InvalidArgumentError

from ..enum.inventory_enum import TransactionType


@dataclass(frozen=True)
class StockPosition:
    quantity: int
    weighted_cost: float
    total_value: float
    is_manual_cost: bool = False

    @classmethod
    def from_inventory(cls, inventory) -> Optional["StockPosition"]:
        if inventory is None:
            return None
        return cls(
            quantity=inventory.quantity,
            weighted_cost=inventory.weighted_cost,
            total_value=inventory.total_value,
            is_manual_cost=inventory.is_manual_cost,
        )


def _transaction_type(value) -> TransactionType:
    try:
        return TransactionType(value)
    except ValueError:
        raise InvalidArgumentError(f"invalid transaction type: {value}")


def apply_transaction(current: Optional[StockPosition], transaction_type, quantity: int,
                      unit_cost: float) -> StockPosition:
    """Return the position after recording a stock movement.

    ``current`` is None when the SKU has no inventory row yet. Outgoing stock
    never touches the weighted cost; incoming stock blends it.
    """
    transaction_type = _transaction_type(transaction_type)
    if quantity is None or quantity <= 0:
        raise InvalidArgumentError("quantity must be greater than 0")
    if unit_cost is None or unit_cost < 0:
        raise InvalidArgumentError("unit_cost must be greater than or equal to 0")

    if transaction_type == TransactionType.OUT:
        if current is None:
            raise InsufficientInventoryError("insufficient inventory: no inventory record found")
        if current.quantity < quantity:
            raise InsufficientInventoryError(
                f"insufficient inventory: have {current.quantity}, requested {quantity}")

        new_quantity = current.quantity - quantity
        return replace(current, quantity=new_quantity,
                       total_value=new_quantity * current.weighted_cost)

    if current is None:
        return StockPosition(
            quantity=quantity,
            weighted_cost=float(unit_cost),
            total_value=quantity * float(unit_cost),
            is_manual_cost=False,
        )

    new_quantity = current.quantity + quantity
    new_cost = current.weighted_cost
    if new_quantity != 0:
        new_cost = (current.quantity * current.weighted_cost + quantity * unit_cost) / new_quantity

    return replace(current, quantity=new_quantity, weighted_cost=new_cost,
                   total_value=new_quantity * new_cost)


def apply_manual_cost(current: StockPosition, weighted_cost: float) -> StockPosition:
    if weighted_cost is None or weighted_cost < 0:
        raise InvalidArgumentError("weighted_cost must be greater than or equal to 0")

    return replace(current, weighted_cost=float(weighted_cost), is_manual_cost=True,
                   total_value=current.quantity * float(weighted_cost))
