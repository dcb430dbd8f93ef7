from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class _ThirdPartyNoiseFilter(logging.Filter):
    """Keep our own loggers as configured; other libraries only at WARNING+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("driver_schedule."):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: str | int | None = None) -> None:
    """Install a single stderr handler on the root logger. Call once, early."""
    root = logging.getLogger()
    root.setLevel(level or LOG_LEVEL)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(fmt)
    handler.addFilter(_ThirdPartyNoiseFilter())
    root.addHandler(handler)

    logging.captureWarnings(True)
