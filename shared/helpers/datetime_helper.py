from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def days_ago(days: int) -> datetime:
    return utcnow() - timedelta(days=days)
