from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from posengine.core.config import get_settings
from posengine.domain.orders.models import BUSINESS_TYPE_FNB, PAY_AT_TABLE, FnBConfig, OrderStatus

STATUS_LABELS: dict[str, str] = {
    "new": "Đơn hàng mới",
    "confirmed": "Đã xác nhận",
    "sent": "Tạm tính",
    "completed": "Đã thanh toán",
    "cancelled": "Đã hủy",
}


def status_label(status: OrderStatus) -> str:
    return STATUS_LABELS.get(status, STATUS_LABELS["new"])


def is_fnb(config: FnBConfig | None) -> bool:
    return config is not None and config.business_type == BUSINESS_TYPE_FNB


def send_outcome(config: FnBConfig | None) -> OrderStatus:
    """Status the backend moves an order to when it is sent.

    Pay-at-counter venues settle on send, pay-at-table venues keep a
    provisional bill. Used for labels only.
    """
    mode = config.fnb_payment_mode if config is not None else get_settings().default_payment_mode
    return "sent" if mode == PAY_AT_TABLE else "completed"


def format_vnd(amount: float) -> str:
    whole = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if whole < 0 else ""
    digits = f"{abs(int(whole)):,}".replace(",", ".")
    return f"{sign}{digits} {get_settings().currency_symbol}"
