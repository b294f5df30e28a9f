"""Shared base for domain entities"""

from datetime import datetime, timezone
from sqlalchemy import BigInteger, Integer
from sqlmodel import SQLModel

# BIGINT primary keys do not autoincrement on SQLite; INTEGER aliases the rowid there
IdType = BigInteger().with_variant(Integer(), "sqlite")


def utc_now() -> datetime:
    """Timezone-aware UTC timestamp, the form stored in every created_at/updated_at column"""
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """Normalize to aware UTC; naive values are taken to be UTC already"""
    if moment.tzinfo is None or moment.utcoffset() is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class BaseModel(SQLModel):
    pass
