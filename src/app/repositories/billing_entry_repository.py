"""Billing Entry Repository Interface

Defines the contract for billing ledger persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from src.domain.billing_entry import BillingEntry


class BillingEntryRepository(ABC):
    """
    Repository interface for BillingEntry persistence

    Entries are append-only. The only in-place write is assign_bill_id,
    reserved for the legacy backfill.
    """

    @abstractmethod
    async def create(self, entry: BillingEntry) -> BillingEntry:
        """
        Append a new ledger entry

        Args:
            entry: BillingEntry to persist

        Returns:
            Created BillingEntry with generated ID
        """
        pass

    @abstractmethod
    async def exists_bill_id(self, bill_id: str) -> bool:
        """Whether any entry (archived included) already carries bill_id"""
        pass

    @abstractmethod
    async def get_max_bill_id(self) -> Optional[str]:
        """
        Lexicographically greatest canonical bill ID across the whole ledger

        Returns:
            Bill ID (BILL + 6 digits), or None when no canonical ID exists
        """
        pass

    @abstractmethod
    async def find(
        self,
        item_id: Optional[str] = None,
        item_name: Optional[str] = None,
        client_name: Optional[str] = None,
        order_business_id: Optional[str] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
    ) -> List[BillingEntry]:
        """
        All non-archived entries matching the filters, newest first

        Text filters are case-insensitive substring matches.

        Args:
            item_id: Item ID filter
            item_name: Item name filter
            client_name: Client name filter
            order_business_id: Business order ID filter
            created_from: Inclusive lower bound on created_at
            created_to: Inclusive upper bound on created_at

        Returns:
            Entries ordered by created_at DESC, id DESC
        """
        pass

    @abstractmethod
    async def get_legacy_entries(self) -> List[BillingEntry]:
        """
        All entries without a canonical bill ID (archived included)

        Returns:
            Entries ordered by created_at ASC, id ASC
        """
        pass

    @abstractmethod
    async def assign_bill_id(self, entry_ids: List[int], bill_id: str) -> int:
        """
        Set bill_id on the given entries that still lack a canonical one

        Args:
            entry_ids: Entry IDs of one legacy group
            bill_id: Canonical bill ID to assign

        Returns:
            Number of entries updated
        """
        pass

    @abstractmethod
    async def get_distinct_values(self, field_name: str) -> List[str]:
        """
        Sorted distinct non-empty values of one column over non-archived entries

        Args:
            field_name: One of item_id, item_name, client_name, order_business_id
        """
        pass

    @abstractmethod
    async def archive_created_before(self, cutoff: datetime) -> int:
        """Archive entries created before cutoff; returns the number archived"""
        pass
