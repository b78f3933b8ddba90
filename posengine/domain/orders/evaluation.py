from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from posengine.domain.orders.calculations import OrderSummary, summarize
from posengine.domain.orders.models import FnBConfig, LineItem, Order, OrderMode, OrderStatus, Voucher
from posengine.domain.orders.presentation import send_outcome, status_label
from posengine.domain.orders.status import resolve_status
from posengine.governance.authorizer import ActionSet, order_button_visibility, product_button_visibility


@dataclass(frozen=True)
class OrderEvaluation:
    status: OrderStatus
    status_label: str
    actions: ActionSet
    product_actions: dict[str, ActionSet]
    summary: OrderSummary
    send_outcome: OrderStatus

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "status_label": self.status_label,
            "actions": self.actions.to_dict(),
            "product_actions": {item_id: a.to_dict() for item_id, a in self.product_actions.items()},
            "summary": self.summary.to_dict(),
            "send_outcome": self.send_outcome,
        }


def evaluate_order(
    order: Order,
    mode: OrderMode = "update",
    line_items: Iterable[LineItem] | None = None,
    voucher: Voucher | None = None,
    config: FnBConfig | None = None,
) -> OrderEvaluation:
    """Status, permitted actions and totals for one freshly fetched order.

    Nothing is remembered between calls; pass the re-fetched order after every
    mutating action.
    """
    items = list(order.line_items if line_items is None else line_items)
    status = resolve_status(order)
    return OrderEvaluation(
        status=status,
        status_label=status_label(status),
        actions=order_button_visibility(order, mode, items),
        product_actions={item.id: product_button_visibility(item, order) for item in items},
        summary=summarize(order, items, voucher),
        send_outcome=send_outcome(config),
    )
