import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from shared.core.exceptions import InvalidArgumentError, NotFoundError
from shared.helpers.datetime_helper import days_ago
from shared.models.users import User

from ..enum.inventory_enum import ChangeType, EntityType
from ..models.change_logs import ChangeLog
from ..models.skus import Sku
from ..schemas.change_logs_schemas import ChangeLogCreate, ChangeLogRequest

logger = logging.getLogger(__name__)

SKU_HISTORY_LIMIT = 100
TOP_USERS_LIMIT = 5
RECENT_ACTIVITY_LIMIT = 20


def to_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def start_of_day(value: date) -> datetime:
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


# ----------------- Record -----------------


def record_change(db: Session, org_id: UUID, user_id: UUID, entry: ChangeLogCreate) -> ChangeLog:
    entity_types = {e.value for e in EntityType}
    if entry.entity_type not in entity_types:
        raise InvalidArgumentError(
            f"invalid entity_type: {entry.entity_type}; must be one of {sorted(entity_types)}")

    change_types = {c.value for c in ChangeType}
    if entry.change_type not in change_types:
        raise InvalidArgumentError(
            f"invalid change_type: {entry.change_type}; must be one of {sorted(change_types)}")

    db_log = ChangeLog(
        org_id=org_id,
        user_id=user_id,
        entity_type=entry.entity_type,
        entity_id=entry.entity_id,
        sku_id=entry.sku_id,
        change_type=entry.change_type,
        field_name=entry.field_name,
        old_value=entry.old_value,
        new_value=entry.new_value,
        reason=entry.reason,
        meta=entry.metadata,
    )
    db.add(db_log)
    db.commit()
    db.refresh(db_log)
    return db_log


def log_change(db: Session, org_id: UUID, user_id: UUID, entity_type: EntityType, change_type: ChangeType,
               entity_id=None, sku_id=None, field_name=None, old_value=None, new_value=None,
               reason=None, metadata=None) -> Optional[ChangeLog]:
    """Append an audit entry without ever failing the calling operation."""
    try:
        entry = ChangeLogCreate(
            entity_type=entity_type.value,
            change_type=change_type.value,
            entity_id=entity_id,
            sku_id=sku_id,
            field_name=field_name,
            old_value=to_text(old_value),
            new_value=to_text(new_value),
            reason=reason,
            metadata=metadata,
        )
        return record_change(db, org_id, user_id, entry)
    except Exception:
        db.rollback()
        logger.exception("Failed to record %s/%s change for org %s",
                         entity_type.value, change_type.value, org_id)
        return None


# ----------------- Query -----------------


def _log_query(db: Session):
    return (
        db.query(ChangeLog, User.name, Sku.sku_code, Sku.product_name)
        .outerjoin(User, User.id == ChangeLog.user_id)
        .outerjoin(Sku, Sku.id == ChangeLog.sku_id)
    )


def _log_out(row) -> dict:
    log, user_name, sku_code, sku_name = row
    return {
        "id": log.id,
        "org_id": log.org_id,
        "user_id": log.user_id,
        "user_name": user_name,
        "entity_type": log.entity_type,
        "entity_id": log.entity_id,
        "sku_id": log.sku_id,
        "sku_code": sku_code,
        "sku_name": sku_name,
        "change_type": log.change_type,
        "field_name": log.field_name,
        "old_value": log.old_value,
        "new_value": log.new_value,
        "reason": log.reason,
        "metadata": log.meta,
        "created_at": log.created_at,
    }


def build_change_log_filters(org_id: UUID, params: ChangeLogRequest):
    filters = [ChangeLog.org_id == org_id]

    if params.entity_type:
        filters.append(ChangeLog.entity_type == params.entity_type)

    if params.entity_id:
        filters.append(ChangeLog.entity_id == params.entity_id)

    if params.sku_id:
        filters.append(ChangeLog.sku_id == params.sku_id)

    if params.user_id:
        filters.append(ChangeLog.user_id == params.user_id)

    if params.change_type:
        filters.append(ChangeLog.change_type == params.change_type)

    if params.last_days:
        filters.append(ChangeLog.created_at >= days_ago(params.last_days))

    if params.date_from:
        filters.append(ChangeLog.created_at >= start_of_day(params.date_from))

    if params.date_to:
        filters.append(ChangeLog.created_at < start_of_day(params.date_to + timedelta(days=1)))

    return filters


def get_change_log_by_id(db: Session, org_id: UUID, log_id: UUID) -> dict:
    row = _log_query(db).filter(ChangeLog.org_id == org_id, ChangeLog.id == log_id).first()
    if not row:
        raise NotFoundError("Change log not found")
    return _log_out(row)


def get_change_logs(db: Session, org_id: UUID, params: ChangeLogRequest) -> dict:
    filters = build_change_log_filters(org_id, params)

    total = db.query(func.count(ChangeLog.id)).filter(*filters).scalar()

    rows = (
        _log_query(db)
        .filter(*filters)
        .order_by(ChangeLog.created_at.desc())
        .offset(params.offset)
        .limit(params.limit)
        .all()
    )

    return {"logs": [_log_out(row) for row in rows], "total": total}


def get_sku_change_logs(db: Session, org_id: UUID, sku_id: UUID, last_days: int = 30) -> list:
    rows = (
        _log_query(db)
        .filter(
            ChangeLog.org_id == org_id,
            or_(
                ChangeLog.sku_id == sku_id,
                and_(ChangeLog.entity_id == sku_id, ChangeLog.entity_type == EntityType.SKU.value),
            ),
            ChangeLog.created_at >= days_ago(last_days),
        )
        .order_by(ChangeLog.created_at.desc())
        .limit(SKU_HISTORY_LIMIT)
        .all()
    )
    return [_log_out(row) for row in rows]


def get_activity_summary(db: Session, org_id: UUID, last_days: int = 30) -> dict:
    since = days_ago(last_days)

    total_changes = db.query(func.count(ChangeLog.id)).filter(
        ChangeLog.org_id == org_id).scalar()

    recent_changes = db.query(func.count(ChangeLog.id)).filter(
        ChangeLog.org_id == org_id,
        ChangeLog.created_at >= days_ago(1)
    ).scalar()

    by_type = (
        db.query(ChangeLog.change_type, func.count(ChangeLog.id))
        .filter(ChangeLog.org_id == org_id, ChangeLog.created_at >= since)
        .group_by(ChangeLog.change_type)
        .all()
    )

    change_count = func.count(ChangeLog.id).label("changes")
    top_users = (
        db.query(ChangeLog.user_id, User.name, change_count)
        .outerjoin(User, User.id == ChangeLog.user_id)
        .filter(ChangeLog.org_id == org_id, ChangeLog.created_at >= since)
        .group_by(ChangeLog.user_id, User.name)
        .order_by(change_count.desc())
        .limit(TOP_USERS_LIMIT)
        .all()
    )

    recent = get_change_logs(db, org_id, ChangeLogRequest(
        last_days=last_days, limit=RECENT_ACTIVITY_LIMIT))

    return {
        "total_changes": total_changes,
        "recent_changes": recent_changes,
        "changes_by_type": {change_type: count for change_type, count in by_type},
        "top_users": [
            {"user_id": user_id, "user_name": name, "changes": changes}
            for user_id, name, changes in top_users
        ],
        "recent_activity": recent["logs"],
    }
