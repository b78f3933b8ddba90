from __future__ import annotations

from dataclasses import dataclass

from posengine.core.config import get_settings
from posengine.domain.orders.calculations import OrderSummary
from posengine.domain.orders.models import Order


@dataclass
class ReconciliationResult:
    rule: str
    passed: bool
    detail: str


def check_payable_identity(summary: OrderSummary, tolerance: float | None = None) -> ReconciliationResult:
    if tolerance is None:
        tolerance = get_settings().reconciliation_tolerance
    expected = (
        summary.goods_amount
        + summary.tax_amount
        - summary.discount_amount
        - summary.voucher_after_vat_total
    )
    residual = summary.payable_amount - expected
    return ReconciliationResult(
        rule="payable_identity",
        passed=abs(residual) <= tolerance,
        detail=f"expected={expected}, payable={summary.payable_amount}, residual={residual}",
    )


def check_exempt_tax_zero(order: Order, summary: OrderSummary) -> ReconciliationResult:
    if order.tax_mode != "exempt":
        return ReconciliationResult(rule="exempt_tax_zero", passed=True, detail="order is taxed")
    return ReconciliationResult(
        rule="exempt_tax_zero",
        passed=summary.tax_amount == 0,
        detail=f"tax_amount={summary.tax_amount}",
    )


def run_summary_reconciliation(order: Order, summary: OrderSummary) -> list[ReconciliationResult]:
    return [
        check_payable_identity(summary),
        check_exempt_tax_zero(order, summary),
    ]
