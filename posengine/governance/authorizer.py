from __future__ import annotations

import logging
import re
from dataclasses import dataclass, fields
from typing import Any, Iterable

from posengine.domain.orders.models import ACTIONS, PRODUCT_ACTIONS, LineItem, Order, OrderMode, OrderStatus
from posengine.domain.orders.status import is_terminal, resolve_status

logger = logging.getLogger(__name__)

_ALWAYS_IN_UPDATE = frozenset({"cancel", "delete", "payment", "print_temporary"})
_ACTION_ALIASES = {"receive": "payment", "receive/payment": "payment"}
_TERMINAL_REASONS = {
    "completed": "order already completed",
    "cancelled": "order already cancelled",
}


class ActionNotPermittedError(PermissionError):
    def __init__(self, decision: "ActionDecision"):
        super().__init__(decision.reason)
        self.decision = decision


@dataclass(frozen=True)
class ActionDecision:
    allowed: bool
    action: str
    status: OrderStatus
    reason: str

    def to_audit_dict(self) -> dict[str, Any]:
        return {
            "allowed": self.allowed,
            "action": self.action,
            "status": self.status,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class ActionSet:
    cancel: bool = False
    save: bool = False
    confirm: bool = False
    send: bool = False
    payment: bool = False
    delete: bool = False
    print_kitchen: bool = False
    print_temporary: bool = False
    add_product: bool = False
    remove_product: bool = False
    update_quantity: bool = False

    @classmethod
    def from_actions(cls, actions: Iterable[str]) -> "ActionSet":
        return cls(**{normalize_action(a): True for a in actions})

    @property
    def actions(self) -> frozenset[str]:
        return frozenset(f.name for f in fields(self) if getattr(self, f.name))

    def to_dict(self) -> dict[str, bool]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def normalize_action(action: str) -> str:
    """Map ``printKitchen``/``receive`` style names onto the canonical action names."""
    snake = re.sub(r"(?<!^)(?=[A-Z])", "_", str(action).strip()).lower()
    return _ACTION_ALIASES.get(snake, snake)


def _items(order: Order, line_items: Iterable[LineItem] | None) -> list[LineItem]:
    return list(order.line_items if line_items is None else line_items)


def _has_unconfirmed(items: Iterable[LineItem]) -> bool:
    return any(not item.is_confirmed_to_kitchen for item in items)


def permitted_actions(
    order: Order,
    mode: OrderMode,
    line_items: Iterable[LineItem] | None = None,
) -> frozenset[str]:
    status = resolve_status(order)
    if is_terminal(status):
        return frozenset()

    items = _items(order, line_items)
    if mode == "create":
        return frozenset({"cancel", "save", "print_kitchen"}) if items else frozenset()

    if status == "new":
        allowed = set(_ALWAYS_IN_UPDATE) | {"send"}
        if _has_unconfirmed(items):
            allowed.add("print_kitchen")
        return frozenset(allowed)
    if status == "confirmed":
        return frozenset(_ALWAYS_IN_UPDATE | {"send"})
    if status == "sent":
        # retail-style re-confirmation stays available after sending
        return frozenset(_ALWAYS_IN_UPDATE | {"confirm"})
    return frozenset()


def order_button_visibility(
    order: Order,
    mode: OrderMode,
    line_items: Iterable[LineItem] | None = None,
) -> ActionSet:
    return ActionSet.from_actions(permitted_actions(order, mode, line_items))


def can_add_product(order: Order) -> bool:
    status = resolve_status(order)
    if is_terminal(status):
        return False
    if status == "sent" and not order.auto_deduct_inventory_on_send:
        return False
    return order.allow_add_product is not False


def product_button_visibility(item: LineItem, order: Order) -> ActionSet:
    editable = can_add_product(order)
    return ActionSet(
        remove_product=not is_terminal(resolve_status(order)) and not item.is_confirmed_to_kitchen,
        update_quantity=editable,
        add_product=editable,
    )


def can_execute(
    order: Order,
    action: str,
    mode: OrderMode = "update",
    line_item: LineItem | None = None,
    line_items: Iterable[LineItem] | None = None,
) -> ActionDecision:
    status = resolve_status(order)
    name = normalize_action(action)

    def deny(reason: str) -> ActionDecision:
        return ActionDecision(allowed=False, action=name, status=status, reason=reason)

    if name not in ACTIONS:
        return deny(f"unknown action: {action}")
    if is_terminal(status):
        return deny(_TERMINAL_REASONS[status])

    items = _items(order, line_items)
    if name == "confirm" and order.confirmed_at is not None:
        return deny("order already confirmed")
    if name in ("confirm", "payment") and not items:
        return deny("order has no products")
    if name == "send" and order.sent_at is not None:
        return deny("order already sent")

    if name in PRODUCT_ACTIONS:
        if name == "remove_product":
            if line_item is not None and line_item.is_confirmed_to_kitchen:
                return deny("product already sent to kitchen")
        elif not can_add_product(order):
            return deny("products can no longer be changed on this order")
        return ActionDecision(allowed=True, action=name, status=status, reason="allowed")

    if name == "print_kitchen" and mode == "update" and items and not _has_unconfirmed(items):
        return deny("all products already sent to kitchen")
    if name not in permitted_actions(order, mode, items):
        return deny(f"action {name} not available for {status} order in {mode} mode")

    return ActionDecision(allowed=True, action=name, status=status, reason="allowed")


def enforce(
    order: Order,
    action: str,
    mode: OrderMode = "update",
    line_item: LineItem | None = None,
    line_items: Iterable[LineItem] | None = None,
) -> ActionDecision:
    decision = can_execute(order, action, mode=mode, line_item=line_item, line_items=line_items)
    if not decision.allowed:
        logger.info("rejected action=%s on order=%s: %s", decision.action, order.id, decision.reason)
        raise ActionNotPermittedError(decision)
    return decision
