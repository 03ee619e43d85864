from __future__ import annotations

from returns.result import Failure, Result, Success

from order_pricing.core.domain.model.discount import THRESHOLD_FIELDS, DiscountRule
from order_pricing.core.domain.model.errors import PricingError, ValidationError
from order_pricing.core.domain.model.order import Order


def validate_rule(rule: DiscountRule, where: str) -> Result[DiscountRule, PricingError]:
    # 範囲を検査できない未登録のルールは通さない
    if type(rule) not in THRESHOLD_FIELDS:
        return Failure(
            ValidationError(f"{where} is not a supported rule: {type(rule).__name__}")
        )
    if not 0 <= rule.fraction < 1:  # type: ignore[attr-defined]
        return Failure(ValidationError(f"{where}.fraction must be in [0, 1)"))
    threshold = THRESHOLD_FIELDS[type(rule)]
    if threshold is not None and getattr(rule, threshold) < 0:
        return Failure(ValidationError(f"{where}.{threshold} must be >= 0"))
    return Success(rule)


def validate_buyer(order: Order) -> Result[Order, PricingError]:
    # 顧客なしは「割引なし」として有効
    if order.buyer is None:
        return Success(order)
    if not order.buyer.name.strip():
        return Failure(ValidationError("buyer.name is required"))
    if order.buyer.discount is not None:
        return validate_rule(order.buyer.discount, "buyer.discount").map(
            lambda _: order
        )
    return Success(order)


def validate_lines(order: Order) -> Result[Order, PricingError]:
    for i, ln in enumerate(order.lines):
        if ln.item.unit_price < 0:
            return Failure(ValidationError(f"lines[{i}].unit_price must be >= 0"))
        if ln.quantity < 0:
            return Failure(ValidationError(f"lines[{i}].quantity must be >= 0"))
        for where, rule in (
            (f"lines[{i}].item.discount", ln.item.discount),
            (f"lines[{i}].discount", ln.discount),
        ):
            if rule is None:
                continue
            checked = validate_rule(rule, where)
            if isinstance(checked, Failure):
                return checked
    return Success(order)


def validate_order_discount(order: Order) -> Result[Order, PricingError]:
    if order.discount is None:
        return Success(order)
    return validate_rule(order.discount, "discount").map(lambda _: order)


def validate_order(order: Order) -> Result[Order, PricingError]:
    return (
        Success(order)
        .bind(validate_buyer)
        .bind(validate_lines)
        .bind(validate_order_discount)
    )
