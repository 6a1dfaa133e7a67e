from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_handler: "logging.Handler | None" = None


def configure_logging(level: str = "INFO") -> None:
    global _handler
    root = logging.getLogger()
    value = getattr(logging, (level or "").upper(), logging.INFO)
    root.setLevel(value if isinstance(value, int) else logging.INFO)
    if _handler is not None:
        return
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(_handler)
