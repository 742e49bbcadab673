import uuid

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB

from shared.core.database import Base
from shared.helpers.datetime_helper import utcnow


class ChangeLog(Base):
    """Append-only audit trail.

    ``user_id`` and ``sku_id`` are plain references so that history survives
    deletion of the actor or the product.
    """
    __tablename__ = "change_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, nullable=False, index=True)
    entity_type = Column(String(50), nullable=False)
    entity_id = Column(Uuid, nullable=True)
    sku_id = Column(Uuid, nullable=True, index=True)
    change_type = Column(String(50), nullable=False)
    field_name = Column(String(100))
    old_value = Column(Text)
    new_value = Column(Text)
    reason = Column(Text)
    # "metadata" is reserved on declarative classes
    meta = Column("metadata", JSON().with_variant(JSONB, "postgresql"))
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
