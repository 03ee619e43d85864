from __future__ import annotations

import pytest

from order_pricing.core.domain.model.discount import (
    AmountThresholdRule,
    FixedRule,
    PriceThresholdRule,
    VolumeRule,
)
from order_pricing.core.domain.model.order import CatalogItem, Customer, Unit
from order_pricing.core.domain.service.price_calculator import (
    CumulativePriceCalculator,
)

TOLERANCE = 0.001

# 同じルールを複数の参照先で共有する
TEN_PERCENT = FixedRule(0.1)
VOLUME_10 = VolumeRule(10, 0.15)
LINE_OVER_100 = PriceThresholdRule(100, 0.05)
AMOUNT_OVER_100 = AmountThresholdRule(100, 0.05)


@pytest.fixture
def calc() -> CumulativePriceCalculator:
    return CumulativePriceCalculator()


@pytest.fixture
def default_customer() -> Customer:
    return Customer("default")


@pytest.fixture
def john() -> Customer:
    return Customer("john", TEN_PERCENT)


@pytest.fixture
def joane() -> Customer:
    return Customer("joane", LINE_OVER_100)


@pytest.fixture
def pen() -> CatalogItem:
    return CatalogItem(1, "pen", 5, Unit.PIECE)


@pytest.fixture
def expensive_pen() -> CatalogItem:
    return CatalogItem(2, "expensive pen", 15, Unit.PIECE, TEN_PERCENT)


@pytest.fixture
def scissors() -> CatalogItem:
    return CatalogItem(3, "scissors", 10, Unit.PIECE, VOLUME_10)
