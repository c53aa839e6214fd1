from __future__ import annotations

import logging
import sys
from typing import Any, NoReturn

import structlog


_CONFIGURED = False


def _rename_critical(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    if event_dict.get("level") == "critical":
        event_dict["level"] = "fatal"
    return event_dict


def _event_to_msg(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    # Access lines are logged without an event, so there is nothing to rename.
    if "event" in event_dict:
        event_dict["msg"] = event_dict.pop("event")
    return event_dict


def build_pre_chain() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        _rename_critical,
        _event_to_msg,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def build_renderer() -> structlog.processors.LogfmtRenderer:
    return structlog.processors.LogfmtRenderer(key_order=["level", "msg"], drop_missing=True)


def format_duration(seconds: float) -> str:
    """Render an elapsed time with a unit suffix, e.g. ``412.3µs``, ``1.52ms``, ``6.001s``."""

    if seconds < 0.001:
        return f"{seconds * 1_000_000:.1f}µs"
    if seconds < 1:
        return f"{seconds * 1000:.2f}ms"
    return f"{seconds:.3f}s"


def configure_logging(level: int = logging.INFO) -> None:
    """Configure structlog + stdlib logging for logfmt output on stdout.

    Every line starts with ``level=`` and, where the event has one, ``msg=``,
    so alert rules can match on plain substrings.

    Safe to call multiple times (no-op after first call).
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    pre_chain = build_pre_chain()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=build_renderer(),
        foreign_pre_chain=pre_chain,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    # Keep uvicorn's own loggers consistent with our handler.
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logger = logging.getLogger(name)
        logger.handlers = [handler]
        logger.propagate = False
        logger.setLevel(level)

    _CONFIGURED = True


def fatal(msg: str, err: BaseException | str) -> NoReturn:
    """Log at fatal level and terminate the process with exit status 1."""

    structlog.get_logger("faultdemo").critical(msg, err=str(err))
    raise SystemExit(1)
