from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from order_pricing.core.domain.model.discount import DiscountRule
from order_pricing.core.domain.model.order import Customer, Order, OrderLine

DEFAULT_TOLERANCE = 0.001


class PriceCalculator(Protocol):
    def calculate_price(self, order: Order) -> float: ...

    def price_line(self, line: OrderLine, buyer: Customer | None) -> float: ...


@dataclass(frozen=True)
class CumulativePriceCalculator(PriceCalculator):
    """
    明細ごとに 商品 → 明細 → 顧客 の順で割引を掛け合わせ、合計に注文割引を掛ける。

    各割引は元の (単価, 数量) で評価する。前の割引後の金額は見ない。
    10% + 10% は 19% 引き（(1-0.1)*(1-0.1) = 0.81）。
    """

    def price_line(self, line: OrderLine, buyer: Customer | None) -> float:
        unit_price = line.item.unit_price
        quantity = line.quantity

        line_price = unit_price * quantity
        line_price = _apply(line_price, line.item.discount, unit_price, quantity)
        line_price = _apply(line_price, line.discount, unit_price, quantity)
        if buyer is not None:
            line_price = _apply(line_price, buyer.discount, unit_price, quantity)
        return line_price

    def calculate_price(self, order: Order) -> float:
        total = 0.0
        for line in order.lines:  # insertion order
            total += self.price_line(line, order.buyer)
        return self.apply_order_discount(order, total)

    def apply_order_discount(self, order: Order, subtotal: float) -> float:
        # NOTE: 注文割引には (合計, 0) を渡す。数量系ルールは注文レベルでは発動しない
        return _apply(subtotal, order.discount, subtotal, 0)


def _apply(
    amount: float, rule: DiscountRule | None, unit_price: float, quantity: float
) -> float:
    if rule is None:
        return amount
    return amount * (1.0 - rule.evaluate(unit_price, quantity))


def approx_equal(a: float, b: float, tolerance: float = DEFAULT_TOLERANCE) -> bool:
    return abs(a - b) <= tolerance
