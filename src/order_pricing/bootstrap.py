from __future__ import annotations

from order_pricing.core.domain.service.price_calculator import (
    CumulativePriceCalculator,
)
from order_pricing.core.domain.service.price_order_service import (
    PriceOrderDeps,
    PriceOrderService,
)


def build_price_order() -> PriceOrderService:
    return PriceOrderService(PriceOrderDeps(calculator=CumulativePriceCalculator()))
