"""Get Billing Filter Options Use Case

Distinct values for the bill listing filters.
"""

from libs.result import Result, Return, Error
from src.app.repositories.billing_entry_repository import BillingEntryRepository
from .dtos import BillingFilterOptionsDTO


class GetBillingFilterOptions:
    def __init__(self, entry_repo: BillingEntryRepository):
        self.entry_repo = entry_repo

    async def execute(self) -> Result[BillingFilterOptionsDTO]:
        try:
            return Return.ok(
                BillingFilterOptionsDTO(
                    item_ids=await self.entry_repo.get_distinct_values("item_id"),
                    item_names=await self.entry_repo.get_distinct_values("item_name"),
                    client_names=await self.entry_repo.get_distinct_values("client_name"),
                    order_business_ids=await self.entry_repo.get_distinct_values("order_business_id"),
                )
            )
        except Exception as e:
            return Return.err(
                Error(
                    code="GET_FILTER_OPTIONS_FAILED",
                    message="Failed to load billing filter options",
                    reason=str(e),
                )
            )
