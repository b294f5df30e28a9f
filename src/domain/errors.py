"""Domain error codes and exceptions

Expected business outcomes travel as Error codes inside a Result.
The two exceptions below are raised by ID allocation and converted to
errors by the use cases.
"""


class ErrorCode:
    VALIDATION_ERROR = "VALIDATION_ERROR"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    INVENTORY_NOT_FOUND = "INVENTORY_NOT_FOUND"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    EXCEEDS_ORDERED_QUANTITY = "EXCEEDS_ORDERED_QUANTITY"
    ITEM_NOT_ON_ORDER = "ITEM_NOT_ON_ORDER"
    ID_ALLOCATION_FAILED = "ID_ALLOCATION_FAILED"
    SERIES_EXHAUSTED = "SERIES_EXHAUSTED"
    PARTIAL_FAILURE = "PARTIAL_FAILURE"


class SeriesExhausted(Exception):
    """The numbered series has no identifiers left (no wraparound)"""

    def __init__(self, series: str, capacity: int):
        self.series = series
        self.capacity = capacity
        super().__init__(f"ID series '{series}' exhausted (capacity {capacity})")


class IdAllocationFailed(Exception):
    """Every candidate identifier collided within the retry budget"""

    def __init__(self, series: str, attempts: int, last_candidate: str):
        self.series = series
        self.attempts = attempts
        self.last_candidate = last_candidate
        super().__init__(
            f"Could not allocate a unique '{series}' ID after {attempts} attempts "
            f"(last candidate {last_candidate})"
        )
