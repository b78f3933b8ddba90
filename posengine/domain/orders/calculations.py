"""Goods, tax, discount and payable amounts for an order.

All amounts are plain floats in đồng. Nothing is rounded here; rounding is a
presentation concern (see ``presentation.format_vnd``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from posengine.core.config import get_settings
from posengine.domain.orders.models import LineItem, Order, Voucher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderSummary:
    goods_amount: float
    tax_amount: float
    payable_amount: float
    discount_amount: float = 0.0
    post_tax_total: float = 0.0
    voucher_before_vat_total: float = 0.0
    voucher_after_vat_total: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "goods_amount": self.goods_amount,
            "tax_amount": self.tax_amount,
            "payable_amount": self.payable_amount,
            "discount_amount": self.discount_amount,
            "post_tax_total": self.post_tax_total,
            "voucher_before_vat_total": self.voucher_before_vat_total,
            "voucher_after_vat_total": self.voucher_after_vat_total,
        }


def _buckets(vat_buckets: Iterable[int] | None) -> tuple[int, ...]:
    if vat_buckets is None:
        return tuple(get_settings().vat_buckets)
    return tuple(vat_buckets)


def gross_unit_price(item: LineItem, order: Order, vat_buckets: Iterable[int] | None = None) -> float:
    if item.price_incl_vat is not None:
        return item.price_incl_vat
    rate = item.vat_rate
    if order.tax_mode == "exempt" or rate <= 0 or rate not in _buckets(vat_buckets):
        return item.price
    return item.price + item.price * rate / 100


def post_tax_total(item: LineItem, order: Order, vat_buckets: Iterable[int] | None = None) -> float:
    return gross_unit_price(item, order, vat_buckets) * item.quantity


def goods_amount(items: Iterable[LineItem]) -> float:
    return float(sum(item.pre_tax_total for item in items))


def discount_amount(order: Order, items: Sequence[LineItem], vat_buckets: Iterable[int] | None = None) -> float:
    discount = order.discount
    if discount.type == "none":
        return 0.0

    targets = [item for item in items if item.vat_rate == discount.vat_rate_target]
    if order.price_includes_vat:
        base = sum(post_tax_total(item, order, vat_buckets) for item in targets)
    else:
        base = sum(item.pre_tax_total for item in targets)

    if discount.type == "percent":
        return float(base * discount.amount / 100)
    if discount.type == "fixed":
        return float(discount.amount)
    if discount.type == "target_price":
        return float(base - discount.amount)
    return 0.0


def vat_for_rate(
    order: Order,
    items: Sequence[LineItem],
    rate: int,
    discount: float | None = None,
    vat_buckets: Iterable[int] | None = None,
) -> float:
    buckets = _buckets(vat_buckets)
    if order.tax_mode == "exempt" or rate <= 0 or rate not in buckets:
        return 0.0

    if discount is None:
        discount = discount_amount(order, items, buckets)
    targeted = discount if order.discount.vat_rate_target == rate else 0.0
    at_rate = [item for item in items if item.vat_rate == rate]

    if order.price_includes_vat:
        product_vat = sum((gross_unit_price(item, order, buckets) - item.price) * item.quantity for item in at_rate)
        discount_vat = targeted - targeted / (1 + rate / 100) if targeted else 0.0
        return float(product_vat - discount_vat)

    taxable = sum(item.pre_tax_total for item in at_rate) - targeted
    return float(taxable * rate / 100)


def full_vat(
    order: Order,
    items: Sequence[LineItem],
    discount: float | None = None,
    vat_buckets: Iterable[int] | None = None,
) -> float:
    buckets = _buckets(vat_buckets)
    if discount is None:
        discount = discount_amount(order, items, buckets)
    return float(sum(vat_for_rate(order, items, rate, discount, buckets) for rate in buckets))


def tax_amount(
    order: Order,
    items: Sequence[LineItem],
    voucher: Voucher | None = None,
    discount: float | None = None,
    vat_buckets: Iterable[int] | None = None,
) -> float:
    if order.tax_mode == "exempt":
        return 0.0
    if not any(item.vat_rate > 0 for item in items):
        return 0.0

    voucher_vat = voucher.vat_total if voucher is not None else 0.0
    return full_vat(order, items, discount, vat_buckets) - voucher_vat


def payable_amount(
    order: Order,
    items: Sequence[LineItem],
    voucher: Voucher | None = None,
    discount: float | None = None,
    vat_buckets: Iterable[int] | None = None,
) -> float:
    if discount is None:
        discount = discount_amount(order, items, vat_buckets)
    gross = sum(post_tax_total(item, order, vat_buckets) for item in items)
    voucher_after = voucher.after_vat_total if voucher is not None else 0.0
    return float(gross - discount - voucher_after)


def _warn_unknown_rates(order: Order, items: Sequence[LineItem], buckets: tuple[int, ...]) -> None:
    if order.tax_mode == "exempt" or not get_settings().warn_on_unknown_vat_rate:
        return
    unknown = sorted({item.vat_rate for item in items if item.vat_rate not in buckets})
    if unknown:
        logger.warning(
            "order %s has VAT rates outside %s: %s; those lines contribute no tax",
            order.id,
            list(buckets),
            unknown,
        )


def summarize(
    order: Order,
    line_items: Iterable[LineItem] | None = None,
    voucher: Voucher | None = None,
    vat_buckets: Iterable[int] | None = None,
) -> OrderSummary:
    items = list(order.line_items if line_items is None else line_items)
    if voucher is None:
        voucher = order.voucher
    buckets = _buckets(vat_buckets)
    _warn_unknown_rates(order, items, buckets)

    discount = discount_amount(order, items, buckets)
    summary = OrderSummary(
        goods_amount=goods_amount(items),
        tax_amount=tax_amount(order, items, voucher, discount, buckets),
        payable_amount=payable_amount(order, items, voucher, discount, buckets),
        discount_amount=discount,
        post_tax_total=float(sum(post_tax_total(item, order, buckets) for item in items)),
        voucher_before_vat_total=voucher.before_vat_total if voucher is not None else 0.0,
        voucher_after_vat_total=voucher.after_vat_total if voucher is not None else 0.0,
    )
    logger.debug("order %s summary: %s", order.id, summary)
    return summary
