from __future__ import annotations

import pytest

from conftest import (
    AMOUNT_OVER_100,
    LINE_OVER_100,
    TEN_PERCENT,
    TOLERANCE,
    VOLUME_10,
)
from order_pricing.core.domain.model.discount import FixedRule, VolumeRule
from order_pricing.core.domain.model.order import (
    CatalogItem,
    Customer,
    Order,
    OrderLine,
    Unit,
)
from order_pricing.core.domain.service.price_calculator import (
    CumulativePriceCalculator,
    approx_equal,
)


def _total(calc: CumulativePriceCalculator, order: Order) -> float:
    return calc.calculate_price(order)


def test_no_discounts(calc, default_customer, pen) -> None:
    order = Order(101, default_customer, (OrderLine(pen, 1),))
    assert _total(calc, order) == pytest.approx(5.0, abs=TOLERANCE)


def test_customer_discount(calc, john, pen) -> None:
    order = Order(102, john, (OrderLine(pen, 1),))
    assert _total(calc, order) == pytest.approx(4.5, abs=TOLERANCE)


def test_item_discount(calc, default_customer, expensive_pen) -> None:
    order = Order(103, default_customer, (OrderLine(expensive_pen, 1),))
    assert _total(calc, order) == pytest.approx(13.5, abs=TOLERANCE)


def test_item_and_customer_discounts_stack_multiplicatively(
    calc, john, expensive_pen
) -> None:
    order = Order(104, john, (OrderLine(expensive_pen, 1),))
    assert _total(calc, order) == pytest.approx(12.15, abs=TOLERANCE)


def test_volume_discount_below_threshold(calc, default_customer, scissors) -> None:
    order = Order(105, default_customer, (OrderLine(scissors, 1),))
    assert _total(calc, order) == pytest.approx(10.0, abs=TOLERANCE)


def test_volume_discount_reached(calc, default_customer, scissors) -> None:
    order = Order(106, default_customer, (OrderLine(scissors, 15),))
    assert _total(calc, order) == pytest.approx(127.5, abs=TOLERANCE)


def test_volume_and_line_total_discounts(calc, joane, scissors) -> None:
    order = Order(107, joane, (OrderLine(scissors, 15),))
    assert _total(calc, order) == pytest.approx(121.125, abs=TOLERANCE)


def test_item_line_and_customer_discounts(calc, joane, expensive_pen) -> None:
    order = Order(108, joane, (OrderLine(expensive_pen, 20, TEN_PERCENT),))
    assert _total(calc, order) == pytest.approx(230.85, abs=TOLERANCE)


def test_order_discount_applies_to_summed_total(calc, joane, expensive_pen) -> None:
    order = Order(
        109, joane, (OrderLine(expensive_pen, 20, TEN_PERCENT),), AMOUNT_OVER_100
    )
    assert _total(calc, order) == pytest.approx(219.3075, abs=TOLERANCE)


def test_total_without_discounts_is_sum_of_lines(calc) -> None:
    prices = [1.25, 3.5, 10.0, 0.0]
    items = [CatalogItem(i, f"item-{i}", p, Unit.KILOGRAM) for i, p in enumerate(prices)]
    quantities = [4, 3, 7, 100]
    order = Order(
        1, Customer("plain"), tuple(OrderLine(it, q) for it, q in zip(items, quantities))
    )
    expected = sum(it.unit_price * q for it, q in zip(items, quantities))
    assert _total(calc, order) == pytest.approx(expected, abs=TOLERANCE)


def test_stacking_is_not_additive(calc) -> None:
    item = CatalogItem(1, "widget", 40, Unit.PIECE, FixedRule(0.2))
    order = Order(1, Customer("c", FixedRule(0.3)), (OrderLine(item, 2),))
    total = _total(calc, order)
    assert total == pytest.approx(40 * 2 * 0.8 * 0.7, abs=TOLERANCE)
    assert not approx_equal(total, 40 * 2 * (1 - 0.5))


def test_each_rule_sees_original_price_and_quantity(calc) -> None:
    # 商品割引後 (90) では閾値 100 を下回るが、元の明細額 (100) で評価される
    item = CatalogItem(1, "box", 10, Unit.PIECE, TEN_PERCENT)
    order = Order(1, Customer("c", LINE_OVER_100), (OrderLine(item, 10),))
    assert _total(calc, order) == pytest.approx(100 * 0.9 * 0.95, abs=TOLERANCE)


def test_missing_buyer_skips_customer_discount(calc, expensive_pen) -> None:
    order = Order(1, None, (OrderLine(expensive_pen, 1),))
    assert _total(calc, order) == pytest.approx(13.5, abs=TOLERANCE)


def test_empty_order_totals_zero(calc, john) -> None:
    assert _total(calc, Order(1, john, ())) == 0.0


def test_order_level_volume_rule_never_fires(calc, default_customer, pen) -> None:
    # 注文割引は数量 0 で評価される
    order = Order(1, default_customer, (OrderLine(pen, 50),), VolumeRule(1, 0.5))
    assert _total(calc, order) == pytest.approx(250.0, abs=TOLERANCE)

    zero_threshold = Order(1, default_customer, (OrderLine(pen, 50),), VolumeRule(0, 0.5))
    assert _total(calc, zero_threshold) == pytest.approx(125.0, abs=TOLERANCE)


def test_same_rule_shared_at_every_level(calc) -> None:
    item = CatalogItem(1, "pen", 10, Unit.PIECE, TEN_PERCENT)
    order = Order(
        1, Customer("c", TEN_PERCENT), (OrderLine(item, 1, TEN_PERCENT),), TEN_PERCENT
    )
    assert _total(calc, order) == pytest.approx(10 * 0.9**4, abs=TOLERANCE)


def test_calculation_is_idempotent(calc, joane, scissors, expensive_pen) -> None:
    order = Order(
        1,
        joane,
        (OrderLine(scissors, 15), OrderLine(expensive_pen, 20, TEN_PERCENT)),
        AMOUNT_OVER_100,
    )
    assert _total(calc, order) == _total(calc, order)
    assert order.lines[0].item.discount is VOLUME_10


def test_price_line_matches_total_for_single_line(calc, joane, expensive_pen) -> None:
    line = OrderLine(expensive_pen, 20, TEN_PERCENT)
    order = Order(1, joane, (line,))
    assert calc.price_line(line, joane) == _total(calc, order)


def test_approx_equal_tolerance() -> None:
    assert approx_equal(1.0, 1.001)
    assert not approx_equal(1.0, 1.0011)
    assert approx_equal(1.0, 1.05, tolerance=0.1)
