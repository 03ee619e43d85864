from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from returns.result import Failure, Result, Success

from order_pricing.core.domain.model.errors import (
    PricingError,
    UnknownDiscountKind,
    ValidationError,
)


class DiscountRule(Protocol):
    """
    割引ルール。(単価, 数量) から割引率を返す純粋関数。
    割引率は [0, 1) を想定するが、ここでは強制しない（validation 参照）。
    """

    def evaluate(self, unit_price: float, quantity: float) -> float: ...


@dataclass(frozen=True)
class FixedRule(DiscountRule):
    fraction: float

    def evaluate(self, unit_price: float, quantity: float) -> float:
        return self.fraction


@dataclass(frozen=True)
class VolumeRule(DiscountRule):
    min_quantity: float
    fraction: float

    def evaluate(self, unit_price: float, quantity: float) -> float:
        return self.fraction if quantity >= self.min_quantity else 0.0


@dataclass(frozen=True)
class PriceThresholdRule(DiscountRule):
    min_line_total: float
    fraction: float

    def evaluate(self, unit_price: float, quantity: float) -> float:
        return self.fraction if unit_price * quantity >= self.min_line_total else 0.0


@dataclass(frozen=True)
class AmountThresholdRule(DiscountRule):
    min_unit_price: float
    fraction: float

    def evaluate(self, unit_price: float, quantity: float) -> float:
        return self.fraction if unit_price >= self.min_unit_price else 0.0


# kind -> (rule class, threshold field or None)
_KINDS: dict[str, tuple[type, str | None]] = {
    "fixed": (FixedRule, None),
    "volume": (VolumeRule, "min_quantity"),
    "price_threshold": (PriceThresholdRule, "min_line_total"),
    "amount_threshold": (AmountThresholdRule, "min_unit_price"),
}

DISCOUNT_KINDS: tuple[str, ...] = tuple(_KINDS)

# rule class -> threshold field or None（validation が参照する）
THRESHOLD_FIELDS: dict[type, str | None] = {
    cls: threshold for cls, threshold in _KINDS.values()
}


def discount_from_spec(spec: Mapping[str, Any]) -> Result[DiscountRule, PricingError]:
    """
    Example:
      {"kind": "volume", "min_quantity": 10, "fraction": 0.15}
    """
    if not isinstance(spec, Mapping):
        return Failure(ValidationError("discount spec must be an object"))

    kind = str(spec.get("kind", ""))
    if kind not in _KINDS:
        return Failure(
            UnknownDiscountKind(
                message=f"kind must be one of: {', '.join(DISCOUNT_KINDS)}", kind=kind
            )
        )

    rule_cls, threshold = _KINDS[kind]
    names = ("fraction",) if threshold is None else (threshold, "fraction")

    values: dict[str, float] = {}
    for name in names:
        if name not in spec or spec[name] is None:
            return Failure(ValidationError(f"{kind}.{name} is required"))
        try:
            values[name] = float(spec[name])
        except (TypeError, ValueError):
            return Failure(ValidationError(f"{kind}.{name} must be a number"))

    return Success(rule_cls(**values))
