from __future__ import annotations

import pytest

from posengine.core.config import get_settings
from posengine.domain.orders.evaluation import evaluate_order
from posengine.domain.orders.models import FnBConfig, LineItem, Order
from posengine.domain.orders.presentation import format_vnd, is_fnb, send_outcome, status_label


def test_evaluate_new_order(scenario_order):
    result = evaluate_order(scenario_order)
    assert result.status == "new"
    assert result.status_label == "Đơn hàng mới"
    assert result.actions.print_kitchen is True
    assert result.actions.confirm is False
    assert set(result.product_actions) == {"l1", "l2", "l3"}
    assert result.product_actions["l1"].remove_product is True
    assert result.summary.payable_amount == pytest.approx(490_000)
    assert result.send_outcome == "completed"


def test_evaluate_after_refetch_reflects_new_state(at_stage):
    before = evaluate_order(at_stage("new"))
    after = evaluate_order(at_stage("sent"), config=FnBConfig(fnb_payment_mode=2))
    assert before.actions.send is True
    assert after.actions.send is False
    assert after.status_label == "Tạm tính"
    assert after.send_outcome == "sent"
    assert after.product_actions["l1"].add_product is False


def test_evaluate_create_mode_uses_given_items():
    draft = Order()
    empty = evaluate_order(draft, mode="create")
    assert empty.actions.actions == frozenset()
    assert empty.summary.payable_amount == 0

    line = LineItem(id="d1", product_id="p", quantity=1, price=45_000, vat_rate=8)
    filled = evaluate_order(draft, mode="create", line_items=[line])
    assert filled.actions.actions == {"cancel", "save", "print_kitchen"}
    assert filled.summary.payable_amount == pytest.approx(48_600)


def test_evaluation_to_dict(scenario_order):
    data = evaluate_order(scenario_order).to_dict()
    assert data["status"] == "new"
    assert data["actions"]["cancel"] is True
    assert data["summary"]["goods_amount"] == pytest.approx(450_000)


@pytest.mark.parametrize(
    "amount,expected",
    [(490_000, "490.000 ₫"), (1_234.5, "1.235 ₫"), (0, "0 ₫"), (-1_500, "-1.500 ₫"), (999.4, "999 ₫")],
)
def test_format_vnd(amount, expected):
    assert format_vnd(amount) == expected


def test_labels_and_config_helpers():
    assert status_label("cancelled") == "Đã hủy"
    assert status_label("completed") == "Đã thanh toán"
    assert is_fnb(FnBConfig()) is True
    assert is_fnb(FnBConfig(business_type=1)) is False
    assert is_fnb(None) is False
    assert send_outcome(None) == "completed"


def test_default_payment_mode_from_env(monkeypatch):
    monkeypatch.setenv("POS_DEFAULT_PAYMENT_MODE", "2")
    get_settings.cache_clear()
    assert send_outcome(None) == "sent"
