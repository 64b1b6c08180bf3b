"""Structured logging setup for the fraud assessment engine."""

import asyncio
import functools
import logging
import sys
from contextvars import ContextVar
from typing import Any, Dict, List, Optional
from pathlib import Path

_log_context: ContextVar[Dict[str, Any]] = ContextVar("fraud_engine_log_context", default={})


class ContextFilter(logging.Filter):
    """Add context information (claim id, component) to log records."""

    def __init__(self, defaults: Optional[Dict[str, Any]] = None):
        super().__init__()
        self.defaults: Dict[str, Any] = defaults or {"claim_id": "-", "component": "-"}

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.defaults.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        for key, value in _log_context.get().items():
            setattr(record, key, value)
        return True


# Global context filter instance
_context_filter = ContextFilter()


def setup_logging(
    level: str = "INFO",
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - [%(claim_id)s] %(message)s",
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up structured logging with optional file output.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Format string for log messages
        log_file: Optional path to log file

    Returns:
        Configured root logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    formatter = logging.Formatter(log_format)
    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        handler.addFilter(_context_filter)
        root_logger.addHandler(handler)

    return root_logger


def get_context() -> Dict[str, Any]:
    """Return a copy of the context fields active in the current task."""
    return dict(_log_context.get())


def set_context(**kwargs):
    """
    Set context fields for all subsequent log messages in the current task.

    Example:
        set_context(claim_id="CLM-123", component="orchestrator")
        logger.info("Assessing claim")  # Will include claim_id and component

    Args:
        **kwargs: Context key-value pairs
    """
    context = dict(_log_context.get())
    context.update(kwargs)
    _log_context.set(context)


def clear_context():
    """Clear all context fields."""
    _log_context.set({})


def with_context(**context_kwargs):
    """
    Decorator to add context to all log messages within a function.

    Works for both plain and ``async`` functions; the previous context is
    restored when the call returns.

    Example:
        @with_context(component="document-analyzer")
        async def analyze_document(doc):
            logger.info("Analyzing")  # Includes component

    Args:
        **context_kwargs: Context key-value pairs
    """
    def decorator(func):
        if asyncio.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                token = _log_context.set({**_log_context.get(), **context_kwargs})
                try:
                    return await func(*args, **kwargs)
                finally:
                    _log_context.reset(token)

            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            token = _log_context.set({**_log_context.get(), **context_kwargs})
            try:
                return func(*args, **kwargs)
            finally:
                _log_context.reset(token)

        return wrapper
    return decorator
