from __future__ import annotations

import logging
import pathlib
import sys
import threading
import time
import traceback

import orjson

LOG_FILE_NAME = "reversi-ai.log"


def get_log_path() -> pathlib.Path:
    return pathlib.Path.cwd() / LOG_FILE_NAME


def setup_logging(overwrite: bool = True, level: int = logging.INFO, log_path: pathlib.Path | None = None) -> None:
    """Configure root logging to a single file plus stderr.

    - Overwrites the log file on first setup (per process) if overwrite is True
    - Adds a STDERR handler for immediate visibility
    - Installs sys.excepthook and threading excepthook
    - Captures warnings via logging
    """
    root_logger = logging.getLogger()
    # Prevent duplicate handlers on re-entry
    if getattr(root_logger, "_reversi_logging_configured", False):
        return

    log_path = log_path or get_log_path()
    fmt = "%(asctime)s.%(msecs)03d %(levelname)s [%(process)d:%(threadName)s] %(name)s - %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    file_handler = logging.FileHandler(log_path, mode="w" if overwrite else "a", encoding="utf-8")
    file_handler.setFormatter(formatter)
    stderr_handler = logging.StreamHandler(stream=sys.stderr)
    stderr_handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=[file_handler, stderr_handler], force=True)
    root_logger._reversi_logging_configured = True  # type: ignore[attr-defined]

    logging.captureWarnings(True)
    sys.excepthook = _log_unhandled_exception  # type: ignore[assignment]
    threading.excepthook = _log_thread_exception


def _log_unhandled_exception(exc_type, exc_value, exc_tb) -> None:  # type: ignore[no-untyped-def]
    logger = logging.getLogger("unhandled")
    tb_str = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
    logger.critical("Unhandled exception:\n%s", tb_str)


def _log_thread_exception(args) -> None:  # type: ignore[no-untyped-def]
    logger = logging.getLogger("thread")
    tb_str = "".join(traceback.format_exception(args.exc_type, args.exc_value, args.exc_traceback))
    logger.critical("Unhandled thread exception in %s:\n%s", getattr(args, "thread", None), tb_str)


def log_event(module: str, event: str, **kwargs) -> None:
    """Structured event logging through the central logger.

    Emits a single JSON line via logger ``event.<module>``.
    """
    payload = {"ts": time.time(), "module": module, "event": event}
    payload.update(kwargs)
    logging.getLogger(f"event.{module}").info(orjson.dumps(payload).decode("utf-8"))
