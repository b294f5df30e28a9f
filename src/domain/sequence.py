"""Numbered ID series

Order IDs: ORD-<YYYY>-<NNN>, restarting at 001 every calendar year.
Bill IDs: BILL<NNNNNN>, one global series starting at BILL000001.
Neither series wraps around; exceeding capacity raises SeriesExhausted.
"""

import re
from typing import Optional
from src.domain.errors import SeriesExhausted

ORDER_SERIES = "order"
BILL_SERIES = "bill"

BILL_ID_PREFIX = "BILL"
BILL_NUMBER_WIDTH = 6
BILL_NUMBER_CAPACITY = 999999
BILL_ID_PATTERN = r"^BILL[0-9]{6}$"

ORDER_ID_PREFIX = "ORD"
ORDER_NUMBER_WIDTH = 3
ORDER_NUMBER_CAPACITY = 999

_BILL_ID_RE = re.compile(BILL_ID_PATTERN)


def is_canonical_bill_id(value: Optional[str]) -> bool:
    return bool(value) and _BILL_ID_RE.match(value) is not None


def parse_bill_number(bill_id: Optional[str]) -> Optional[int]:
    """Number part of a canonical bill ID, None for anything else"""
    if not is_canonical_bill_id(bill_id):
        return None
    return int(bill_id[len(BILL_ID_PREFIX):])


def format_bill_id(number: int) -> str:
    if number > BILL_NUMBER_CAPACITY:
        raise SeriesExhausted(BILL_SERIES, BILL_NUMBER_CAPACITY)
    if number < 1:
        raise ValueError(f"Bill number must be positive, got {number}")
    return f"{BILL_ID_PREFIX}{number:0{BILL_NUMBER_WIDTH}d}"


def order_id_prefix(year: int) -> str:
    return f"{ORDER_ID_PREFIX}-{year:04d}-"


def order_id_pattern(year: int) -> str:
    return rf"^{ORDER_ID_PREFIX}-{year:04d}-[0-9]{{{ORDER_NUMBER_WIDTH}}}$"


def parse_order_number(order_id: Optional[str], year: int) -> Optional[int]:
    """Sequence part of an order ID for the given year, None if it belongs elsewhere"""
    if not order_id or re.match(order_id_pattern(year), order_id) is None:
        return None
    return int(order_id[len(order_id_prefix(year)):])


def format_order_id(year: int, number: int) -> str:
    if number > ORDER_NUMBER_CAPACITY:
        raise SeriesExhausted(f"{ORDER_SERIES}:{year}", ORDER_NUMBER_CAPACITY)
    if number < 1:
        raise ValueError(f"Order number must be positive, got {number}")
    return f"{order_id_prefix(year)}{number:0{ORDER_NUMBER_WIDTH}d}"
