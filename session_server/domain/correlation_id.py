"""Connection-scoped correlation ids for log records."""

import contextvars
import logging
import uuid
from typing import Any, MutableMapping, Optional

ROOT_LOGGER_NAME = "session_server"

_correlation_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "correlation_id", default=None
)


def generate_correlation_id() -> str:
    """Return a fresh random correlation id."""
    return uuid.uuid4().hex


def get_correlation_id() -> Optional[str]:
    """Return the correlation id bound to the current context, if any."""
    return _correlation_id_var.get()


def bind_correlation_id(correlation_id: Optional[str] = None) -> str:
    """Bind a correlation id to the current context and return it.

    A new id is generated when none is supplied. Each worker thread runs in
    its own context, so ids never leak between connections.
    """
    value = correlation_id or generate_correlation_id()
    _correlation_id_var.set(value)
    return value


def clear_correlation_id() -> None:
    """Forget the correlation id bound to the current context."""
    _correlation_id_var.set(None)


def component_name(logger_name: str) -> str:
    """Strip the package prefix from a logger name."""
    prefix = f"{ROOT_LOGGER_NAME}."
    if logger_name.startswith(prefix):
        return logger_name[len(prefix) :]
    return logger_name


def get_logger(name: str) -> "CorrelationLoggerAdapter":
    """Return an adapter for ``session_server.<name>``."""
    return CorrelationLoggerAdapter(logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}"), {})


class CorrelationLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that stamps correlation id and component on every record."""

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        correlation_id = get_correlation_id()
        extra["correlation_id"] = correlation_id if correlation_id is not None else "-"
        extra["component"] = component_name(self.logger.name)
        kwargs["extra"] = extra
        return msg, kwargs

    def debug_enabled(self) -> bool:
        """Return True when DEBUG records would be emitted."""
        return self.logger.isEnabledFor(logging.DEBUG)
