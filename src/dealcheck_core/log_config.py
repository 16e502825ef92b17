"""structlog setup.

Library modules only call ``structlog.get_logger()``. Applications call
``configure_logging`` once at startup to pick the level and renderer.
"""

import logging
from typing import Optional

import structlog

from .config import DealCheckConfig


def configure_logging(config: Optional[DealCheckConfig] = None) -> None:
    """Configure structlog from ``config`` (defaults to ``DealCheckConfig()``)."""
    config = config or DealCheckConfig()

    if config.use_json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(config.log_level)
        ),
    )
