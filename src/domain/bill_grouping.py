"""Bill grouping

The single rule deciding which ledger entries form one bill. Both the bill
listing (ephemeral synthetic IDs) and the legacy backfill (persisted IDs)
go through these functions.

- Entry with a canonical bill_id: grouped by that bill_id
- Legacy entry: grouped by (order_business_id, date, time), the entries
  written by one billing call before bill IDs existed
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Iterator, List, Optional, Tuple
from src.domain.billing_entry import BillingEntry
from src.domain.sequence import format_bill_id, is_canonical_bill_id

GroupKey = Tuple[str, ...]


def grouping_key(entry: BillingEntry) -> GroupKey:
    if is_canonical_bill_id(entry.bill_id):
        return ("bill", entry.bill_id)
    # Two separate legacy billings of one order within the same minute share this key
    return ("legacy", entry.order_business_id, entry.date, entry.time)


@dataclass
class EntryGroup:
    key: GroupKey
    entries: List[BillingEntry] = field(default_factory=list)

    @property
    def is_legacy(self) -> bool:
        return self.key[0] == "legacy"

    @property
    def bill_id(self) -> Optional[str]:
        """Canonical bill ID, None for legacy groups"""
        return None if self.is_legacy else self.key[1]

    @property
    def latest_created_at(self) -> datetime:
        return max(entry.created_at for entry in self.entries)

    @property
    def earliest_created_at(self) -> datetime:
        return min(entry.created_at for entry in self.entries)


def group_entries(entries: Iterable[BillingEntry]) -> List[EntryGroup]:
    """Partition entries by grouping key, groups in first-encountered order"""
    groups: dict = {}
    for entry in entries:
        key = grouping_key(entry)
        group = groups.get(key)
        if group is None:
            group = groups[key] = EntryGroup(key=key)
        group.entries.append(entry)
    return list(groups.values())


def number_legacy_groups(
    groups: Iterable[EntryGroup], last_number: int
) -> Iterator[Tuple[EntryGroup, str]]:
    """
    Pair each legacy group with the next bill ID after last_number, in the
    order given. Canonical groups are skipped.

    Raises SeriesExhausted lazily, when the group that would overflow is reached,
    so callers can keep the assignments made before it.
    """
    number = last_number
    for group in groups:
        if not group.is_legacy:
            continue
        number += 1
        yield group, format_bill_id(number)
