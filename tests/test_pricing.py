from decimal import Decimal

import pytest

from pricing import (
    clamp_quantity,
    fetch_catalog,
    format_amount,
    parse_price,
    resolve_line_items,
    unit_price_for,
)
from tests.conftest import add_product


class TestParsePrice:
    @pytest.mark.parametrize(
        "display, expected",
        [
            ("₹150", Decimal("150")),
            ("₹1,250.50", Decimal("1250.50")),
            ("$2.50", Decimal("2.50")),
            ("Rs. 99 per kg", Decimal("99")),
            (120, Decimal("120")),
        ],
    )
    def test_extracts_first_number(self, display, expected):
        assert parse_price(display) == expected

    @pytest.mark.parametrize("display", [None, "", "free", "₹"])
    def test_returns_none_without_digits(self, display):
        assert parse_price(display) is None


class TestUnitPrice:
    def test_prefers_stored_numeric_value(self):
        assert unit_price_for({"price": "₹999", "price_value": 150}) == Decimal("150")

    def test_falls_back_to_display_string(self):
        assert unit_price_for({"price": "₹1,200", "price_value": None}) == Decimal("1200")

    def test_defaults_to_zero(self):
        assert unit_price_for({"price": "call us", "price_value": None}) == Decimal("0")
        assert unit_price_for(None) == Decimal("0")


@pytest.mark.parametrize(
    "qty, expected",
    [(3, 3), ("2", 2), (0, 1), (-4, 1), (None, 1), ("lots", 1), (2.9, 2)],
)
def test_clamp_quantity(qty, expected):
    assert clamp_quantity(qty) == expected


class TestResolveLineItems:
    def test_prices_from_catalog_only(self):
        catalog = {7: {"_id": 7, "title": "Zinc Sulphate", "price": "₹150", "price_value": 150.0}}
        requested = [{"id": 7, "qty": 3, "price": 1, "unit_price": 1, "title": "cheap"}]

        cart = resolve_line_items(requested, catalog)

        assert len(cart.lines) == 1
        line = cart.lines[0]
        assert (line.id, line.title, line.qty, line.unit_price) == (7, "Zinc Sulphate", 3, Decimal("150.0"))
        assert cart.total == Decimal("450")

    def test_unknown_product_is_zero_priced(self):
        catalog = {1: {"_id": 1, "title": "Neem Oil", "price": "₹350", "price_value": 350.0}}

        cart = resolve_line_items([{"id": 1, "qty": 1}, {"id": 99, "qty": 5}], catalog)

        assert [line.to_dict() for line in cart.lines] == [
            {"id": 1, "title": "Neem Oil", "qty": 1, "unit_price": 350.0},
            {"id": 99, "title": "", "qty": 5, "unit_price": 0.0},
        ]
        assert cart.total == Decimal("350")

    def test_total_is_exact_sum_of_subtotals(self):
        catalog = {
            1: {"_id": 1, "title": "A", "price": "₹0.10", "price_value": 0.1},
            2: {"_id": 2, "title": "B", "price": "₹0.20", "price_value": 0.2},
        }

        cart = resolve_line_items([{"id": 1, "qty": 3}, {"id": 2, "qty": 1}], catalog)

        assert cart.total == Decimal("0.5")
        assert format_amount(cart.total, "₹") == "₹0.50"


def test_fetch_catalog_reads_requested_ids_only(db):
    add_product(db, 1, "Vermicompost", "₹450", 450)
    add_product(db, 2, "Neem Oil", "₹350", 350)

    found = fetch_catalog(db, [2, 2, 5])

    assert set(found) == {2}
    assert found[2]["title"] == "Neem Oil"
