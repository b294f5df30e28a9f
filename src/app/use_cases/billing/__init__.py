"""Billing domain use cases"""
from .bill_order import BillOrder
from .list_bills import ListBills
from .backfill_bill_ids import BackfillBillIds
from .get_filter_options import GetBillingFilterOptions
from .dtos import (
    BillItemDTO,
    BillOrderCommandDTO,
    BillingEntryDTO,
    BillOrderResponseDTO,
    ListBillsQueryDTO,
    BillDTO,
    ListBillsResponseDTO,
    BackfillResultDTO,
    BillingFilterOptionsDTO,
)

__all__ = [
    "BillOrder",
    "ListBills",
    "BackfillBillIds",
    "GetBillingFilterOptions",
    "BillItemDTO",
    "BillOrderCommandDTO",
    "BillingEntryDTO",
    "BillOrderResponseDTO",
    "ListBillsQueryDTO",
    "BillDTO",
    "ListBillsResponseDTO",
    "BackfillResultDTO",
    "BillingFilterOptionsDTO",
]
