from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

from pythonjsonlogger import jsonlogger

LOGGER_NAME = "cycleroute"


def _parse_level(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def _resolve_log_dir(configured: Path | None) -> Path | None:
    if configured is None:
        return None
    try:
        configured.mkdir(parents=True, exist_ok=True)
    except OSError:
        return None
    return configured


def get_logger(level: str = "INFO", log_dir: Path | None = None) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)

    if getattr(logger, "_configured", False):
        return logger

    logger.setLevel(_parse_level(level))
    logger.propagate = False

    formatter = jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(message)s")

    sh = logging.StreamHandler(sys.stdout)
    sh.setFormatter(formatter)
    logger.addHandler(sh)

    resolved = _resolve_log_dir(log_dir)
    if resolved is not None:
        try:
            fh = logging.FileHandler(resolved / "run.log.jsonl", encoding="utf-8")
            fh.setFormatter(formatter)
            logger.addHandler(fh)
        except OSError:
            pass

    logger._configured = True  # type: ignore[attr-defined]
    return logger


def log_event(event: str, **fields: Any) -> None:
    # Structured: event is message + a top-level key
    get_logger().info(event, extra={"event": event, **fields})
