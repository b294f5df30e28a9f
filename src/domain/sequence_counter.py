"""Sequence Counter Domain Entity

Store-side high-water mark for a numbered ID series, read under a row lock
so concurrent allocators serialize instead of racing on read-max-then-insert.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import BigInteger, String
from src.domain.base import BaseModel, IdType, utc_now


class SequenceCounter(BaseModel, table=True):
    """
    Sequence Counter - Last number handed out for one series

    Domain Rules:
    - name is unique ("bill", "order:2026", ...)
    - last_value only grows
    """

    __tablename__ = "sequence_counters"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    name: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Series name"
    )

    last_value: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Last number allocated in this series"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
    )
