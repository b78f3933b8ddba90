from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from posengine.core.config import get_settings
from posengine.domain.orders.models import LineItem, Order

BASE_TIME = datetime(2026, 1, 10, 8, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch):
    for key in ("POS_VAT_BUCKETS", "POS_WARN_ON_UNKNOWN_VAT_RATE", "POS_DEFAULT_PAYMENT_MODE"):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def base_time() -> datetime:
    return BASE_TIME


@pytest.fixture()
def scenario_items() -> list[LineItem]:
    return [
        LineItem(id="l1", product_id="p1", name="Cà phê sữa", quantity=2, price=100_000, vat_rate=10),
        LineItem(id="l2", product_id="p2", name="Trà đào", quantity=2, price=100_000, vat_rate=10),
        LineItem(id="l3", product_id="p3", name="Bánh mì", quantity=1, price=50_000, vat_rate=0),
    ]


@pytest.fixture()
def scenario_order(scenario_items: list[LineItem]) -> Order:
    return Order(id="O1", code="HD0001", created_at=BASE_TIME, line_items=scenario_items)


@pytest.fixture()
def at_stage(scenario_order: Order):
    """Return the scenario order moved to a lifecycle stage."""

    def _build(stage: str, **extra) -> Order:
        stamps: dict[str, datetime] = {}
        steps = ["confirmed_at", "sent_at", "received_at"]
        if stage == "cancelled":
            stamps["cancelled_at"] = BASE_TIME + timedelta(hours=4)
        else:
            upto = {"new": 0, "confirmed": 1, "sent": 2, "completed": 3}[stage]
            for idx, field in enumerate(steps[:upto]):
                stamps[field] = BASE_TIME + timedelta(hours=idx + 1)
        return scenario_order.model_copy(update={**stamps, **extra})

    return _build
