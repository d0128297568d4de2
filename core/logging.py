# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Core - Structured logging with context
# PURPOSE: Consistent, queryable logging across resolvers and orchestrator
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging

Loggers for the plot marketplace core, carrying ledger context:

- Component tag per logger (ledger, resolver, orchestrator, ...)
- Contextual fields: land_id, token_id, operation, account, chain_id
- JSON lines for log aggregation (LOG_FORMAT=json), human lines otherwise
- Named checkpoints for multi-transaction operations

Context lives in a ContextVar. Resolvers fan reads out as concurrent
coroutines on one thread, and each coroutine keeps its own fields.

Usage:
    from core.logging import get_logger, log_context

    logger = get_logger("orchestrator.transactions")

    with log_context(land_id=3, operation="mint_plots"):
        logger.info("Submitting chunk", extra={"chunk_size": 50})
"""

import json
import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union


class ComponentType(str, Enum):
    """Which layer emitted a record."""
    LEDGER = "ledger"
    RESOLVER = "resolver"
    ORCHESTRATOR = "orchestrator"
    SERVICE = "service"
    STORAGE = "storage"


# ============================================================================
# CONTEXT
# ============================================================================

@dataclass(frozen=True)
class LogContext:
    """
    Fields attached to every record emitted inside a log_context block.

    Immutable: nesting produces a merged copy, never mutates the parent.
    """
    land_id: Optional[int] = None
    token_id: Optional[int] = None
    operation: Optional[str] = None
    account: Optional[str] = None
    chain_id: Optional[int] = None
    correlation_id: Optional[str] = None
    component: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def merged(self, **kwargs) -> "LogContext":
        extra = {**self.extra, **(kwargs.pop("extra", None) or {})}
        return replace(self, extra=extra, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Set fields only, with `extra` flattened in."""
        data = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "extra" and getattr(self, f.name) is not None
        }
        data.update(self.extra)
        return data


_EMPTY_CONTEXT = LogContext()
_current_context: ContextVar[LogContext] = ContextVar(
    "plot_marketplace_log_context", default=_EMPTY_CONTEXT
)


def get_current_context() -> LogContext:
    """Context of the running coroutine (empty outside any log_context)."""
    return _current_context.get()


@contextmanager
def log_context(**kwargs):
    """
    Add fields to every record logged inside the block.

    Nested blocks inherit the outer fields; `extra` dicts are merged.

    Example:
        with log_context(land_id=3, token_id=17):
            logger.info("Classifying token")
    """
    context = get_current_context().merged(**kwargs)
    token = _current_context.set(context)
    try:
        yield context
    finally:
        _current_context.reset(token)


# ============================================================================
# FORMATTERS
# ============================================================================

def _record_data(record: logging.LogRecord) -> Dict[str, Any]:
    return getattr(record, "data", None) or {}


class StructuredFormatter(logging.Formatter):
    """
    One JSON object per line.

    Keys: timestamp, level, logger, message, context, data, exception,
    source. `static_fields` (e.g. service name) are added to every line.
    """

    def __init__(self, static_fields: Optional[Dict[str, Any]] = None):
        super().__init__()
        self.static_fields = dict(static_fields or {})

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(self.static_fields)

        context = get_current_context().to_dict()
        if context:
            payload["context"] = context

        data = _record_data(record)
        if data:
            payload["data"] = data

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        payload["source"] = f"{record.module}:{record.funcName}:{record.lineno}"
        return json.dumps(payload, default=str)


class HumanFormatter(logging.Formatter):
    """
    Single-line developer output.

        2026-10-19 12:00:00 INFO     services.plot_service [op=resolve_project_plots land=3]: ...
    """

    _SHOWN = (("operation", "op"), ("land_id", "land"), ("token_id", "token"), ("account", "acct"))

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

        context = get_current_context()
        tags = [
            f"{label}={getattr(context, name)}"
            for name, label in self._SHOWN
            if getattr(context, name) is not None
        ]
        where = f" [{' '.join(tags)}]" if tags else ""

        line = f"{stamp} {record.levelname:<8} {record.name}{where}: {record.getMessage()}"

        data = _record_data(record)
        if data:
            line += f" {data}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


# ============================================================================
# LOGGERS
# ============================================================================

class ContextLogger(logging.LoggerAdapter):
    """
    Adapter that folds call-site `extra` and the component tag into a
    single `data` attribute on the record, which both formatters render.
    """

    def process(self, msg, kwargs):
        data = dict(kwargs.pop("extra", None) or {})
        component = (self.extra or {}).get("component")
        if component and "component" not in data:
            data["component"] = component
        kwargs["extra"] = {"data": data}
        return msg, kwargs


def get_logger(
    name: str,
    component: Optional[ComponentType] = None,
) -> ContextLogger:
    """
    Context-aware logger for a module.

    Args:
        name: Logger name, normally __name__
        component: Layer tag added to every record
    """
    return ContextLogger(
        logging.getLogger(name),
        {"component": component.value if component is not None else None},
    )


def configure_logging(
    level: Union[str, int] = "INFO",
    json_output: bool = False,
    stream=None,
) -> None:
    """
    Install one root handler.

    Args:
        level: DEBUG, INFO, WARNING, ERROR (or a logging constant)
        json_output: JSON lines; also enabled by LOG_FORMAT=json
        stream: Output stream (stdout by default)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    use_json = json_output or os.getenv("LOG_FORMAT", "").lower() == "json"

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(StructuredFormatter() if use_json else HumanFormatter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    # web3 logs every provider request at DEBUG
    logging.getLogger("web3").setLevel(max(level, logging.INFO))
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ============================================================================
# CHECKPOINTS
# ============================================================================

def log_checkpoint(
    name: str,
    data: Optional[Dict[str, Any]] = None,
    logger: Union[logging.Logger, logging.LoggerAdapter, None] = None,
) -> None:
    """
    Log a named milestone of a multi-transaction operation.

    A partial batch mint can be reconstructed from its checkpoints
    (mint_started, mint_chunk_confirmed, mint_finished).

    Args:
        name: Checkpoint name
        data: Checkpoint payload
        logger: Logger or adapter (defaults to the "checkpoint" logger)
    """
    context = get_current_context()
    record_data: Dict[str, Any] = {"checkpoint": name}
    for key in ("operation", "land_id", "token_id"):
        value = getattr(context, key)
        if value is not None:
            record_data[key] = value
    if data:
        record_data["data"] = data

    if logger is None:
        logger = logging.getLogger("checkpoint")
    if isinstance(logger, logging.LoggerAdapter):
        logger.info(f"CHECKPOINT: {name}", extra=record_data)
    else:
        logger.info(f"CHECKPOINT: {name}", extra={"data": record_data})


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
    "log_checkpoint",
]
