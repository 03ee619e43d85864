from __future__ import annotations

import sys

import uvicorn

from order_pricing.adapters.inbound.cli import run_cli
from order_pricing.bootstrap import build_price_order
from order_pricing.config import get_settings
from order_pricing.logging_config import setup_logging


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    if not argv:
        print("usage: order-pricing '<json>'")
        return 2

    setup_logging(get_settings().log_level)
    return run_cli(build_price_order(), argv[0])


def serve() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)
    uvicorn.run(
        "order_pricing.asgi:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )


if __name__ == "__main__":
    raise SystemExit(main())
