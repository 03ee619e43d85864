from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol, Sequence

from returns.result import Result

from order_pricing.core.domain.model.errors import PricingError

# discount spec: {"kind": "fixed" | "volume" | "price_threshold" | "amount_threshold", ...}
DiscountSpec = Mapping[str, Any]


@dataclass(frozen=True)
class PriceOrderLine:
    item_id: int
    name: str
    unit_price: float
    quantity: int
    unit: str = "piece"
    item_discount: str | None = None  # discounts のキー
    line_discount: str | None = None


@dataclass(frozen=True)
class PriceOrderCommand:
    order_id: int
    lines: Sequence[PriceOrderLine]
    customer_name: str | None = None
    customer_discount: str | None = None
    order_discount: str | None = None
    discounts: Mapping[str, DiscountSpec] = field(default_factory=dict)


@dataclass(frozen=True)
class LineQuote:
    item_id: int
    quantity: int
    gross: float
    net: float


@dataclass(frozen=True)
class PriceQuote:
    order_id: int
    customer_name: str | None
    lines: Sequence[LineQuote]
    subtotal: float
    total: float


class PriceOrderUseCase(Protocol):
    def price_order(self, command: PriceOrderCommand) -> Result[PriceQuote, PricingError]: ...
