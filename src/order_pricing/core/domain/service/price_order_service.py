from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Mapping, Tuple

from returns.pipeline import flow
from returns.pointfree import bind, map_
from returns.result import Failure, Result, Success

from order_pricing.core.domain.model.discount import DiscountRule, discount_from_spec
from order_pricing.core.domain.model.errors import (
    PricingError,
    UnknownDiscount,
    ValidationError,
)
from order_pricing.core.domain.model.order import (
    CatalogItem,
    Customer,
    Order,
    OrderLine,
    Unit,
)
from order_pricing.core.domain.service.price_calculator import PriceCalculator
from order_pricing.core.domain.service.validation import validate_order
from order_pricing.core.ports.inbound.price_order import (
    LineQuote,
    PriceOrderCommand,
    PriceOrderUseCase,
    PriceQuote,
)

logger = logging.getLogger(__name__)

Rules = Mapping[str, DiscountRule]


@dataclass(frozen=True)
class PriceOrderDeps:
    calculator: PriceCalculator


@dataclass(frozen=True)
class PriceOrderContext:
    command: PriceOrderCommand
    rules: Rules


@dataclass(frozen=True)
class PriceOrderService(PriceOrderUseCase):
    deps: PriceOrderDeps

    def price_order(
        self, command: PriceOrderCommand
    ) -> Result[PriceQuote, PricingError]:
        result = flow(
            command,
            _validate_command,
            bind(_build_rules),
            bind(_build_order),
            bind(validate_order),
            map_(self._quote),
        )
        if isinstance(result, Failure):
            err = result.failure()
            logger.info("order %s rejected: %s", command.order_id, type(err).__name__)
        return result

    def _quote(self, order: Order) -> PriceQuote:
        calc = self.deps.calculator
        lines = tuple(
            LineQuote(
                item_id=ln.item.item_id,
                quantity=ln.quantity,
                gross=ln.gross(),
                net=calc.price_line(ln, order.buyer),
            )
            for ln in order.lines
        )
        subtotal = 0.0
        for lq in lines:
            subtotal += lq.net
        total = calc.calculate_price(order)

        logger.debug(
            "order %s priced: lines=%d subtotal=%s total=%s",
            order.order_id,
            len(lines),
            subtotal,
            total,
        )
        return PriceQuote(
            order_id=order.order_id,
            customer_name=order.buyer.name if order.buyer is not None else None,
            lines=lines,
            subtotal=subtotal,
            total=total,
        )


# ---- pure helpers ----------------------------------------------------------


def _validate_command(
    cmd: PriceOrderCommand,
) -> Result[PriceOrderCommand, PricingError]:
    if cmd.customer_name is not None and not cmd.customer_name.strip():
        return Failure(ValidationError("customer_name must be non-empty when provided"))
    if cmd.customer_discount is not None and cmd.customer_name is None:
        return Failure(
            ValidationError("customer_name is required when customer_discount is set")
        )

    for i, ln in enumerate(cmd.lines):
        if not ln.name.strip():
            return Failure(ValidationError(f"lines[{i}].name is required"))
        if ln.unit not in {u.value for u in Unit}:
            return Failure(ValidationError(f"lines[{i}].unit is not a known unit"))

    return Success(cmd)


def _build_rules(cmd: PriceOrderCommand) -> Result[PriceOrderContext, PricingError]:
    # 名前ごとに 1 インスタンスだけ作り、参照先で共有する
    rules: dict[str, DiscountRule] = {}
    for name, spec in cmd.discounts.items():
        built = discount_from_spec(spec)
        if isinstance(built, Failure):
            err = built.failure()
            return Failure(replace(err, message=f"discounts[{name}]: {err.message}"))
        rules[name] = built.unwrap()
    return Success(PriceOrderContext(command=cmd, rules=rules))


def _resolve(
    rules: Rules, name: str | None, where: str
) -> Result[DiscountRule | None, PricingError]:
    if name is None:
        return Success(None)
    if name not in rules:
        return Failure(UnknownDiscount(message=f"{where} is not declared", name=name))
    return Success(rules[name])


def _build_order(ctx: PriceOrderContext) -> Result[Order, PricingError]:
    cmd = ctx.command

    buyer: Customer | None = None
    if cmd.customer_name is not None:
        resolved = _resolve(ctx.rules, cmd.customer_discount, "customer_discount")
        if isinstance(resolved, Failure):
            return resolved
        buyer = Customer(name=cmd.customer_name, discount=resolved.unwrap())

    lines: list[OrderLine] = []
    for i, ln in enumerate(cmd.lines):
        item_rule = _resolve(ctx.rules, ln.item_discount, f"lines[{i}].item_discount")
        if isinstance(item_rule, Failure):
            return item_rule
        line_rule = _resolve(ctx.rules, ln.line_discount, f"lines[{i}].line_discount")
        if isinstance(line_rule, Failure):
            return line_rule

        item = CatalogItem(
            item_id=ln.item_id,
            name=ln.name,
            unit_price=ln.unit_price,
            unit=Unit(ln.unit),
            discount=item_rule.unwrap(),
        )
        lines.append(
            OrderLine(item=item, quantity=ln.quantity, discount=line_rule.unwrap())
        )

    order_rule = _resolve(ctx.rules, cmd.order_discount, "order_discount")
    if isinstance(order_rule, Failure):
        return order_rule

    items: Tuple[OrderLine, ...] = tuple(lines)
    return Success(
        Order(
            order_id=cmd.order_id,
            buyer=buyer,
            lines=items,
            discount=order_rule.unwrap(),
        )
    )
