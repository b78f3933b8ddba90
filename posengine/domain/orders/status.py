from __future__ import annotations

import logging

from posengine.domain.orders.models import TERMINAL_STATUSES, Order, OrderStatus

logger = logging.getLogger(__name__)


def resolve_status(order: Order | None) -> OrderStatus:
    """Canonical status of an order, derived from its timestamps only.

    Precedence is cancelled > completed > sent > confirmed > new, checked in
    that order even when the data is inconsistent (e.g. both cancelled_at and
    received_at set).
    """
    if order is None:
        return "new"
    if order.cancelled_at is not None:
        status: OrderStatus = "cancelled"
    elif order.received_at is not None:
        status = "completed"
    elif order.sent_at is not None:
        status = "sent"
    elif order.confirmed_at is not None:
        status = "confirmed"
    else:
        status = "new"

    if order.cancelled_at is not None and order.received_at is not None:
        logger.debug("order %s has both cancelled_at and received_at; resolved as cancelled", order.id)
    return status


def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STATUSES
