from __future__ import annotations

from order_pricing.adapters.inbound.web.fastapi_app import create_app
from order_pricing.bootstrap import build_price_order
from order_pricing.config import get_settings
from order_pricing.logging_config import setup_logging

setup_logging(get_settings().log_level)
app = create_app(build_price_order())
