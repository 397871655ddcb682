"""structlog setup for LifeQuest.

Engine modules grab a logger with ``get_logger(__name__)`` and log
key-value events. ``configure_logging`` picks the renderer: a coloured
console view while developing, one JSON object per line otherwise.

Example:
    >>> from lifequest.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Level up", level=4, max_hp=130)
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

    from lifequest.core.config import Settings


APP_NAME = "lifequest"
_STDLIB_FORMAT = "%(asctime)s %(levelname)-8s %(name)s | %(message)s"


def add_app_context(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Tag every event with the application name."""
    event_dict.setdefault("app", APP_NAME)
    return event_dict


def _processor_chain(json_format: bool) -> list[Processor]:
    chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_app_context,
        structlog.processors.StackInfoRenderer(),
    ]
    if json_format:
        chain += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    else:
        chain.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return chain


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
) -> None:
    """Set up structlog and the standard library root logger.

    Args:
        level: Name of the minimum level, e.g. ``"DEBUG"``.
        json_format: Render events as JSON lines.
        log_file: Also append standard library records to this file.
    """
    threshold = logging.getLevelName(level.upper())
    if not isinstance(threshold, int):
        threshold = logging.INFO

    structlog.configure(
        processors=_processor_chain(json_format),
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(format=_STDLIB_FORMAT, level=threshold, handlers=handlers, force=True)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def configure_from_settings(settings: Settings) -> None:
    """Apply the logging options carried by ``settings``."""
    configure_logging(level=settings.log_level, json_format=settings.log_json)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Return a structlog logger, usually named after the calling module."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Attach key-value pairs to every event logged from this context.

    Example:
        >>> bind_context(character="Aria", dungeon="forest")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Forget everything added with ``bind_context``."""
    structlog.contextvars.clear_contextvars()


__all__ = [
    "add_app_context",
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
]
