"""
infrastructure.logging_setup - One-time logging configuration for adapters.

Library modules only ever call logging.getLogger(__name__); the CLI and the
REST app call configure_logging() once at startup.
"""

from __future__ import annotations

import logging

LOG_FORMAT = (
    "%(asctime)s - %(name)s - %(filename)s - [line:%(lineno)03d] - "
    "%(levelname)s - %(message)s"
)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # Third-party HTTP clients are noisy at INFO.
    for name in ("httpx", "urllib3", "openai"):
        logging.getLogger(name).setLevel(logging.WARNING)
