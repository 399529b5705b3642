"""Logging setup for notelabels.

Records go to the console and to a rotating JSON-lines file.  Signal traces
emitted by :class:`~notelabels.core.signals.ChangeSignal` carry a
:class:`~notelabels.core.signals.SignalTrace` which both formatters render.
"""

from __future__ import annotations

import datetime
import json
import logging
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path
from typing import Any

from .core.signals import SignalTrace

LOG_DIR_ENV = "NOTELABELS_LOG_DIR"
LOG_FILE_NAME = "notelabels.jsonl"
_MAX_BYTES = 2 * 1024 * 1024
_BACKUPS = 3

logger = logging.getLogger("notelabels")

_log_path: Path | None = None


def _signal_trace(record: logging.LogRecord) -> SignalTrace | None:
    trace = getattr(record, "signal_trace", None)
    return trace if isinstance(trace, SignalTrace) else None


class ConsoleFormatter(logging.Formatter):
    """Short console lines, with signal traces summarised inline."""

    def __init__(self) -> None:
        super().__init__("%(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        trace = _signal_trace(record)
        if trace is None:
            return base
        return (
            f"{base} [{trace.signal} #{trace.count}, "
            f"{trace.listeners} listeners, {trace.subscriptions} subscriptions]"
        )


class JsonFormatter(logging.Formatter):
    """One JSON object per record; signal traces land under ``"signal"``."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.datetime.fromtimestamp(record.created, datetime.UTC)
        data: dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        trace = _signal_trace(record)
        if trace is not None:
            data["signal"] = trace._asdict()
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False)


def _resolve_log_dir(log_dir: str | Path | None) -> Path:
    if log_dir is None:
        env_dir = os.environ.get(LOG_DIR_ENV)
        log_dir = env_dir or Path.home() / ".notelabels" / "logs"
    path = Path(log_dir).expanduser()
    path.mkdir(parents=True, exist_ok=True)
    return path.resolve()


def configure_logging(level: int = logging.INFO, *, log_dir: str | Path | None = None) -> Path:
    """Attach console and JSON-lines handlers once and return the log file path.

    The directory is *log_dir*, else ``$NOTELABELS_LOG_DIR``, else
    ``~/.notelabels/logs``.  Later calls leave the handlers untouched.
    """
    global _log_path

    if _log_path is not None and logger.handlers:
        return _log_path

    path = _resolve_log_dir(log_dir) / LOG_FILE_NAME

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(ConsoleFormatter())
    logger.addHandler(console)

    json_file = RotatingFileHandler(
        path, encoding="utf-8", maxBytes=_MAX_BYTES, backupCount=_BACKUPS
    )
    json_file.setLevel(logging.DEBUG)
    json_file.setFormatter(JsonFormatter())
    logger.addHandler(json_file)

    logger.setLevel(logging.DEBUG)
    _log_path = path
    return path


__all__ = ["ConsoleFormatter", "JsonFormatter", "configure_logging", "logger"]
