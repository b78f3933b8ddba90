from __future__ import annotations

from typing import Any, Callable, Iterable, Literal

from posengine.domain.orders.models import PRODUCT_ACTIONS, LineItem, Order
from posengine.governance.authorizer import enforce, normalize_action

QuantityMode = Literal["absolute", "delta"]


class LineItemNotFoundError(KeyError):
    pass


def _index_of(items: list[LineItem], item_id: str) -> int:
    for idx, item in enumerate(items):
        if item.id == item_id:
            return idx
    raise LineItemNotFoundError(item_id)


def add_line_item(items: Iterable[LineItem], item: LineItem, merge: bool = True) -> list[LineItem]:
    result = list(items)
    if item.quantity <= 0:
        return result

    if merge:
        for idx, existing in enumerate(result):
            if (
                existing.product_id is not None
                and existing.product_id == item.product_id
                and existing.price == item.price
                and not existing.is_confirmed_to_kitchen
            ):
                result[idx] = existing.model_copy(update={"quantity": existing.quantity + item.quantity})
                return result

    result.append(item)
    return result


def remove_line_item(items: Iterable[LineItem], item_id: str) -> list[LineItem]:
    result = list(items)
    del result[_index_of(result, item_id)]
    return result


def change_quantity(
    items: Iterable[LineItem],
    item_id: str,
    value: int,
    mode: QuantityMode = "absolute",
) -> list[LineItem]:
    result = list(items)
    idx = _index_of(result, item_id)
    current = result[idx]

    if mode == "delta":
        quantity = current.quantity + int(value)
    elif mode == "absolute":
        quantity = int(value)
    else:
        raise ValueError(f"unsupported quantity mode: {mode}")

    if quantity <= 0:
        del result[idx]
        return result
    result[idx] = current.model_copy(update={"quantity": quantity})
    return result


def apply_guarded(
    order: Order,
    action: str,
    mutation: Callable[..., list[LineItem]],
    *args: Any,
    line_item: LineItem | None = None,
    **kwargs: Any,
) -> list[LineItem]:
    """Authorize ``action`` on ``order`` and then apply ``mutation`` to its items.

    Raises ``ActionNotPermittedError`` when the order no longer accepts the
    change; the order's items are never touched in place. For product actions
    the targeted line is looked up by id (the first argument or ``item_id``) when
    ``line_item`` is not given.
    """
    if line_item is None and normalize_action(action) in PRODUCT_ACTIONS:
        item_id = args[0] if args else kwargs.get("item_id")
        line_item = next((item for item in order.line_items if item.id == item_id), None)
    enforce(order, action, line_item=line_item)
    return mutation(order.line_items, *args, **kwargs)
