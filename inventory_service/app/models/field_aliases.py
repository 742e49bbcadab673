import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid

from shared.core.database import Base
from shared.helpers.datetime_helper import utcnow


class FieldAlias(Base):
    __tablename__ = "field_aliases"
    __table_args__ = (
        UniqueConstraint("org_id", "table_name", "field_name", name="uq_field_aliases_org_table_field"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    table_name = Column(String(100), nullable=False)
    field_name = Column(String(100), nullable=False)
    display_name = Column(String(255), nullable=False)
    description = Column(Text)
    is_hidden = Column(Boolean, nullable=False, default=False)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


# display name, description and sort order seeded per organization
DEFAULT_TABLE_FIELDS = {
    "skus": [
        ("sku", "SKU Code", "Unique product identifier", 1),
        ("name", "Product Name", "Name of the product", 2),
        ("description", "Description", "Product description", 3),
        ("category", "Category", "Product category", 4),
        ("brand", "Brand", "Product brand", 5),
        ("unit_of_measure", "Unit", "Unit of measurement", 6),
        ("is_active", "Active", "Whether SKU is active", 7),
    ],
    "inventory": [
        ("quantity", "Stock Level", "Current quantity in stock", 1),
        ("weighted_cost", "Avg Cost", "Weighted average cost per unit", 2),
        ("manual_cost", "Manual Cost", "Manually set cost override", 3),
    ],
    "inventory_transactions": [
        ("type", "Type", "Transaction type (IN/OUT)", 1),
        ("quantity", "Quantity", "Number of units moved", 2),
        ("unit_cost", "Unit Cost", "Cost per unit", 3),
        ("notes", "Notes", "Transaction notes", 4),
        ("created_at", "Date", "Transaction date", 5),
    ],
    "users": [
        ("name", "Full Name", "User's full name", 1),
        ("email", "Email", "User's email address", 2),
        ("role", "Role", "User access level", 3),
        ("is_active", "Status", "Account status", 4),
        ("last_login_at", "Last Login", "Last login timestamp", 5),
    ],
}
