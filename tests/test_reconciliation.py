from __future__ import annotations

import pytest

from posengine.domain.orders.calculations import summarize
from posengine.domain.orders.models import LineItem, Order
from posengine.reconciliation.rules import (
    check_exempt_tax_zero,
    check_payable_identity,
    run_summary_reconciliation,
)

MIXED_LINES = [
    LineItem(id="a", quantity=3, price=17_500, vat_rate=5),
    LineItem(id="b", quantity=1, price=99_999, vat_rate=8),
    LineItem(id="c", quantity=4, price=12_345, vat_rate=10),
    LineItem(id="d", quantity=2, price=30_000, vat_rate=0),
]


@pytest.mark.parametrize("price_includes_vat", [False, True])
@pytest.mark.parametrize("tax_mode", ["standard", "exempt"])
def test_identity_holds_without_discount_or_voucher(price_includes_vat, tax_mode):
    order = Order(line_items=MIXED_LINES, price_includes_vat=price_includes_vat, tax_mode=tax_mode)
    summary = summarize(order)
    results = run_summary_reconciliation(order, summary)
    assert all(r.passed for r in results), [r.detail for r in results]


def test_scenario_identity(scenario_order):
    result = check_payable_identity(summarize(scenario_order))
    assert result.passed is True
    assert result.rule == "payable_identity"


def test_identity_flags_vat_inclusive_price_on_exempt_order():
    order = Order(
        tax_mode="exempt",
        line_items=[LineItem(id="a", quantity=1, price=100_000, price_incl_vat=110_000, vat_rate=10)],
    )
    result = check_payable_identity(summarize(order))
    assert result.passed is False
    assert "residual=10000" in result.detail


def test_exempt_rule_skips_taxed_orders(scenario_order):
    result = check_exempt_tax_zero(scenario_order, summarize(scenario_order))
    assert result.passed is True
    assert result.detail == "order is taxed"
