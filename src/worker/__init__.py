"""Operator workers for the billing ledger"""
from .bill_id_backfill import BillIdBackfillWorker

__all__ = ["BillIdBackfillWorker"]
