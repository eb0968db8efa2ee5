from __future__ import annotations

"""
Logging Core Orchestrator.

Maintains the idempotent lifecycle of the logging subsystem. Records are
pushed through a QueueHandler and written by a QueueListener thread, so
file I/O never stalls the crawl.
"""

import atexit
import logging
import os
import queue
import sys
from logging.handlers import QueueHandler, QueueListener
from typing import List, Optional

from ckdu.infra.fs import get_user_data_dir
from ckdu.infra.logging.config import _LEVEL_MAP, LoggingConfig
from ckdu.infra.logging.handlers import (
    _create_rotating_file_handler,
    _is_our_handler,
    _tag_handler,
)

_CONFIGURED_FLAG_ATTR: str = "_ckdu_configured"
_QUEUE_LISTENER_ATTR: str = "_ckdu_queue_listener"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def get_default_log_path(file_name: str = "ckdu.log") -> str:
    """Resolve the standard log file location within the user data directory."""
    return os.path.join(get_user_data_dir(), "logs", file_name)


def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Configure the root logger once, using a queue-backed listener.

    Repeated calls are no-ops unless ``force`` is set, in which case
    previously installed ckdu handlers are torn down first.

    Args:
        cfg: Configuration for the logging system.
        force: Re-initialize even if already configured.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()

    try:
        already_configured = bool(getattr(root, _CONFIGURED_FLAG_ATTR, False))
        if already_configured and not force:
            return root

        level_int = _parse_level(cfg.level)
        root.setLevel(level_int)

        _remove_our_handlers(root)
        _stop_existing_listener(root)

        console_formatter = logging.Formatter(cfg.console_fmt)
        file_formatter = logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt)

        handlers_list: List[logging.Handler] = []

        if cfg.console:
            sh = logging.StreamHandler(sys.stderr)
            sh.setLevel(level_int)
            sh.setFormatter(console_formatter)
            _tag_handler(sh)
            handlers_list.append(sh)

        if cfg.log_file:
            # File logs keep full detail regardless of console verbosity
            fh = _create_rotating_file_handler(
                cfg.log_file,
                logging.DEBUG,
                file_formatter,
                cfg.max_bytes,
                cfg.backup_count,
            )
            if fh:
                handlers_list.append(fh)
                root.setLevel(logging.DEBUG)

        if not handlers_list:
            return root

        log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)

        queue_handler = QueueHandler(log_queue)
        _tag_handler(queue_handler)

        listener = QueueListener(log_queue, *handlers_list, respect_handler_level=True)
        listener.start()

        root.addHandler(queue_handler)

        setattr(root, _QUEUE_LISTENER_ATTR, listener)
        setattr(root, _CONFIGURED_FLAG_ATTR, True)

        atexit.register(_safe_stop_listener, listener)

        return root

    except Exception:
        # Emergency console logging if the queue infrastructure fails
        fallback = logging.getLogger()
        fallback.setLevel(logging.INFO)
        _remove_our_handlers(fallback)

        sh = logging.StreamHandler(sys.stderr)
        sh.setFormatter(logging.Formatter("CRITICAL FALLBACK | %(levelname)s | %(message)s"))
        _tag_handler(sh)
        fallback.addHandler(sh)

        fallback.warning("Logging infrastructure failed. Switched to emergency console.")
        return fallback


def get_logger(name: str) -> logging.Logger:
    """Acquire a named logger (usually ``__name__``)."""
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """Flush pending records and detach ckdu handlers from the root logger."""
    root = logging.getLogger()
    _stop_existing_listener(root)
    _remove_our_handlers(root)
    if hasattr(root, _CONFIGURED_FLAG_ATTR):
        delattr(root, _CONFIGURED_FLAG_ATTR)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _parse_level(level: str) -> int:
    if not level:
        return logging.INFO
    return _LEVEL_MAP.get(str(level).strip().upper(), logging.INFO)


def _remove_our_handlers(root: logging.Logger) -> None:
    for h in list(root.handlers):
        if _is_our_handler(h):
            root.removeHandler(h)
            h.close()


def _stop_existing_listener(root: logging.Logger) -> None:
    listener = getattr(root, _QUEUE_LISTENER_ATTR, None)
    if listener:
        _safe_stop_listener(listener)
        setattr(root, _QUEUE_LISTENER_ATTR, None)


def _safe_stop_listener(listener: Optional[QueueListener]) -> None:
    """
    Stop a QueueListener, tolerating listeners that were already stopped.

    ``QueueListener.stop`` fails once its thread has been joined, which
    happens when both an explicit shutdown and the atexit hook run.
    """
    if not listener:
        return

    if getattr(listener, "_thread", None) is not None:
        listener.stop()
