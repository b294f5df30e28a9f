"""Per-item failures of multi-item operations

Billing and stock adjustment process every requested item independently.
Rejected items are reported as data next to the applied ones; the call only
fails when no item was applied.
"""

from typing import List
from pydantic import BaseModel, Field
from libs.result import Error
from src.domain.errors import ErrorCode


class ItemFailureDTO(BaseModel):
    """One rejected item of a multi-item request"""

    item_id: str = Field(..., description="Requested item ID")
    code: str = Field(..., description="Error code (e.g., INSUFFICIENT_STOCK)")
    message: str = Field(..., description="Human-readable reason")


def failure_error(failures: List[ItemFailureDTO], message: str) -> Error:
    """
    Error for a call where every item was rejected

    The code is the shared one when all failures agree, PARTIAL_FAILURE otherwise.
    """
    codes = {failure.code for failure in failures}
    code = codes.pop() if len(codes) == 1 else ErrorCode.PARTIAL_FAILURE
    return Error(
        code=code,
        message=message,
        reason="; ".join(f"{failure.item_id}: {failure.message}" for failure in failures),
        details=[failure.model_dump() for failure in failures],
    )
