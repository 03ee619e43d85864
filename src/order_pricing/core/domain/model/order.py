from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from order_pricing.core.domain.model.discount import DiscountRule


class Unit(str, Enum):
    # 表示用のみ。価格計算には使わない
    PIECE = "piece"
    KILOGRAM = "kilogram"
    METER = "meter"
    SQUARE_METER = "square_meter"
    CUBIC_METER = "cubic_meter"
    LITER = "liter"


@dataclass(frozen=True)
class Customer:
    name: str
    discount: DiscountRule | None = None


@dataclass(frozen=True)
class CatalogItem:
    item_id: int
    name: str
    unit_price: float
    unit: Unit = Unit.PIECE
    discount: DiscountRule | None = None


@dataclass(frozen=True)
class OrderLine:
    item: CatalogItem
    quantity: int
    discount: DiscountRule | None = None

    def gross(self) -> float:
        return self.item.unit_price * self.quantity


@dataclass(frozen=True)
class Order:
    """
    割引ルールは参照で保持する（所有しない）。
    同じルールを顧客・商品・明細・注文に同時に付けてよい。
    """

    order_id: int
    buyer: Customer | None
    lines: Tuple[OrderLine, ...] = ()
    discount: DiscountRule | None = None
