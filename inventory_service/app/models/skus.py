import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from shared.core.database import Base
from shared.helpers.datetime_helper import utcnow


class Sku(Base):
    __tablename__ = "skus"
    __table_args__ = (
        UniqueConstraint("org_id", "sku_code", name="uq_skus_org_code"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    sku_code = Column(String(50), nullable=False)
    product_name = Column(String(255), nullable=False)
    description = Column(Text)
    category = Column(String(100), index=True)
    supplier = Column(String(255))
    barcode = Column(String(50))
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    inventory = relationship("Inventory", back_populates="sku", uselist=False)
