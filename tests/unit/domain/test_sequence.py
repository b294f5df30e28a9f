"""Unit tests for the numbered ID series"""

import pytest

from src.domain.errors import SeriesExhausted
from src.domain.sequence import (
    format_bill_id,
    format_order_id,
    is_canonical_bill_id,
    parse_bill_number,
    parse_order_number,
)


class TestBillSeries:
    def test_format_pads_to_six_digits(self):
        assert format_bill_id(1) == "BILL000001"
        assert format_bill_id(999999) == "BILL999999"

    def test_format_past_capacity_raises(self):
        with pytest.raises(SeriesExhausted) as exc_info:
            format_bill_id(1000000)

        assert exc_info.value.capacity == 999999

    def test_format_rejects_non_positive(self):
        with pytest.raises(ValueError):
            format_bill_id(0)

    @pytest.mark.parametrize(
        "value",
        [None, "", "BILL12", "BILL0000001", "bill000001", "BILL00000A", "LEGACY-7", " BILL000001"],
    )
    def test_malformed_ids_are_not_canonical(self, value):
        assert is_canonical_bill_id(value) is False
        assert parse_bill_number(value) is None

    def test_parse_canonical(self):
        assert parse_bill_number("BILL000123") == 123


class TestOrderSeries:
    def test_format(self):
        assert format_order_id(2025, 1) == "ORD-2025-001"
        assert format_order_id(2025, 37) == "ORD-2025-037"

    def test_parse_same_year(self):
        assert parse_order_number("ORD-2025-037", 2025) == 37

    def test_parse_other_year_is_none(self):
        assert parse_order_number("ORD-2025-037", 2026) is None

    def test_parse_malformed_is_none(self):
        assert parse_order_number("ORD-2025-37", 2025) is None
        assert parse_order_number(None, 2025) is None

    def test_capacity_is_per_year(self):
        with pytest.raises(SeriesExhausted) as exc_info:
            format_order_id(2025, 1000)

        assert exc_info.value.series == "order:2025"
