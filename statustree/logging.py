"""Logging setup and structured event helpers.

Refresh, merge and provider events are written as one JSON object per record so a
refresh cycle can be traced from a log file. Nothing is printed unless the CLI
asks for a stream or a log directory is configured.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, TextIO

LOG_DIR_ENV = "STATUSTREE_LOG_DIR"

_FORMATS = {
    "json": "%(message)s",
    "text": "%(levelname)s %(name)s %(message)s",
}


def get_logger(name: str = "statustree") -> logging.Logger:
    return logging.getLogger(name)


def _log_dir_from_env(log_dir: Path | None) -> Path | None:
    configured = os.environ.get(LOG_DIR_ENV, "").strip()
    return Path(configured) if configured else log_dir


def _open_handler(stream: TextIO | None, log_dir: Path | None, filename: str) -> logging.Handler:
    if stream is not None:
        return logging.StreamHandler(stream)
    if log_dir is None:
        return logging.NullHandler()
    log_dir.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(log_dir / filename, encoding="utf-8")


def configure_logging(
    *,
    level: str = "info",
    format_name: str = "json",
    stream: TextIO | None = None,
    log_dir: Path | None = None,
    filename: str = "statustree.log",
    logger: logging.Logger | None = None,
) -> logging.Handler | None:
    """Set the level of ``logger`` (root by default) and attach one handler.

    A logger that already has handlers only gets its level updated; no stream or
    file is opened for it. Returns the attached handler, or ``None``.
    """
    target = logger if logger is not None else logging.getLogger()
    target.setLevel(getattr(logging, level.strip().upper(), logging.INFO))
    if target.handlers:
        return None

    handler = _open_handler(stream, _log_dir_from_env(log_dir) if stream is None else None, filename)
    handler.setFormatter(logging.Formatter(_FORMATS.get(format_name, _FORMATS["text"])))
    target.addHandler(handler)
    return handler


def log_event(logger: logging.Logger, event: str, *, level: int = logging.INFO, **fields: Any) -> None:
    payload = {"event": event, **fields}
    logger.log(level, json.dumps(payload, sort_keys=True, default=str))
