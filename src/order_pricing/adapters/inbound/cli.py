from __future__ import annotations

import json
from typing import Any

from returns.result import Success

from order_pricing.core.ports.inbound.price_order import (
    PriceOrderCommand,
    PriceOrderLine,
    PriceOrderUseCase,
    PriceQuote,
)


def run_cli(usecase: PriceOrderUseCase, raw: str) -> int:
    """
    raw: JSON string.
    Example:
      {"order_id":109,"customer_name":"joane","customer_discount":"over100",
       "order_discount":"amount100",
       "discounts":{"ten":{"kind":"fixed","fraction":0.1},
                    "over100":{"kind":"price_threshold","min_line_total":100,"fraction":0.05},
                    "amount100":{"kind":"amount_threshold","min_unit_price":100,"fraction":0.05}},
       "lines":[{"item_id":2,"name":"expensive pen","unit_price":15,"quantity":20,
                 "item_discount":"ten","line_discount":"ten"}]}
    """
    try:
        payload = json.loads(raw)
        cmd = _parse_command(payload)
    except Exception as e:  # noqa: BLE001
        print(f"invalid_input: {e}")
        return 2

    result = usecase.price_order(cmd)

    if isinstance(result, Success):
        print("[ok]", _quote_to_dict(result.unwrap()))
        return 0

    err = result.failure()
    print("[ng]", str(err))
    return 1


def _parse_command(payload: dict[str, Any]) -> PriceOrderCommand:
    lines = [
        PriceOrderLine(
            item_id=int(x["item_id"]),
            name=str(x["name"]),
            unit_price=float(x["unit_price"]),
            quantity=_whole(x["quantity"], "quantity"),
            unit=str(x.get("unit", "piece")),
            item_discount=_opt_str(x.get("item_discount")),
            line_discount=_opt_str(x.get("line_discount")),
        )
        for x in payload.get("lines", [])
    ]
    return PriceOrderCommand(
        order_id=int(payload["order_id"]),
        lines=tuple(lines),
        customer_name=_opt_str(payload.get("customer_name")),
        customer_discount=_opt_str(payload.get("customer_discount")),
        order_discount=_opt_str(payload.get("order_discount")),
        discounts=_parse_discounts(payload.get("discounts") or {}),
    )


def _parse_discounts(raw: Any) -> dict[str, dict[str, Any]]:
    if not isinstance(raw, dict):
        raise ValueError("discounts must be an object")
    for name, spec in raw.items():
        if not isinstance(spec, dict):
            raise ValueError(f"discounts[{name}] must be an object")
    return dict(raw)


def _whole(v: Any, field: str) -> int:
    # 小数の数量は切り捨てずに拒否する（Web 側と同じ挙動）
    n = float(v)
    if not n.is_integer():
        raise ValueError(f"{field} must be a whole number: {v}")
    return int(n)


def _opt_str(v: Any) -> str | None:
    return None if v is None else str(v)


def _quote_to_dict(q: PriceQuote) -> dict[str, Any]:
    return {
        "order_id": q.order_id,
        "customer_name": q.customer_name,
        "subtotal": q.subtotal,
        "total": q.total,
        "lines": [
            {"item_id": lq.item_id, "quantity": lq.quantity, "gross": lq.gross, "net": lq.net}
            for lq in q.lines
        ],
    }
