from __future__ import annotations

import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """stdout にプレーンテキストで出す。uvicorn のロガーもこの設定に乗る。"""
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
        level=level.upper(),
    )
