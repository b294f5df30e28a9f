"""Data Transfer Objects for the Archive Use Case"""

from datetime import datetime
from pydantic import BaseModel, Field


class ArchiveResultDTO(BaseModel):
    """Rows archived per table by one archive run"""

    orders: int = Field(..., ge=0)
    billing_entries: int = Field(..., ge=0)
    inventory: int = Field(..., ge=0)
    archived_count: int = Field(..., ge=0, description="Total rows archived")
    cutoff: datetime = Field(..., description="Rows created before this moment were archived")
    message: str
