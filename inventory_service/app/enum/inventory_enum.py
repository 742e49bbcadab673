from enum import Enum


class TransactionType(str, Enum):
    IN = "in"
    OUT = "out"


class EntityType(str, Enum):
    SKU = "sku"
    INVENTORY = "inventory"
    TRANSACTION = "transaction"
    USER = "user"
    FIELD_ALIAS = "field_alias"


class ChangeType(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"
    MANUAL_COST_UPDATE = "manual_cost_update"


class SupportedTable(str, Enum):
    SKUS = "skus"
    INVENTORY = "inventory"
    INVENTORY_TRANSACTIONS = "inventory_transactions"
    USERS = "users"
