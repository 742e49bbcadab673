import uuid

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from shared.core.database import Base
from shared.helpers.datetime_helper import utcnow


class Inventory(Base):
    __tablename__ = "inventory"
    __table_args__ = (
        UniqueConstraint("org_id", "sku_id", name="uq_inventory_org_sku"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    sku_id = Column(Uuid, ForeignKey("skus.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    weighted_cost = Column(Float, nullable=False, default=0.0)
    total_value = Column(Float, nullable=False, default=0.0)
    is_manual_cost = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    sku = relationship("Sku", back_populates="inventory")

    def apply_position(self, position):
        self.quantity = position.quantity
        self.weighted_cost = position.weighted_cost
        self.total_value = position.total_value
        self.is_manual_cost = position.is_manual_cost
