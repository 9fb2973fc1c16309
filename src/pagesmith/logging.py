"""Structured logging shared by the engine, the operations and the CLI."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

from pagesmith.settings import Settings, get_settings

if TYPE_CHECKING:
    from contextlib import AbstractContextManager

    from structlog.typing import EventDict, Processor

_LOGGING_CONFIGURED = False


def _flatten_extra(
    logger: logging.Logger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Lift the ``extra`` mapping of a call into the event itself.

    Keys already present in the event win over ``extra``.
    """
    extra = event_dict.pop("extra", None)
    if isinstance(extra, dict):
        for key, value in extra.items():
            event_dict.setdefault(key, value)
    return event_dict


def _event_as_message(
    logger: logging.Logger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def _handlers_for(config: Settings) -> list[logging.Handler]:
    """Return stderr plus the optional ``LOG_FILE`` handler."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file, encoding="utf-8"))
    return handlers


def _processors_for(config: Settings) -> list[Processor]:
    """Return the processor chain ending with the JSON or console renderer.

    Args:
        config (Settings): Runtime settings.

    Returns:
        list[Processor]: Ordered structlog processors.
    """
    renderer: Any = structlog.processors.JSONRenderer() if config.log_json else structlog.dev.ConsoleRenderer()
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        _flatten_extra,
        _event_as_message,
        structlog.processors.format_exc_info,
        renderer,
    ]


def configure_logging(*, settings: Settings | None = None, force: bool = False) -> None:
    """Route structlog through stdlib logging, once per process unless forced."""
    global _LOGGING_CONFIGURED  # noqa: PLW0603

    if _LOGGING_CONFIGURED and not force:
        return

    config = settings or get_settings()
    level = logging.getLevelNamesMapping().get(config.log_level.upper(), logging.INFO)

    logging.basicConfig(level=level, format="%(message)s", handlers=_handlers_for(config), force=force)
    structlog.configure(
        processors=_processors_for(config),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _LOGGING_CONFIGURED = True


def get_logger(name: str = "pagesmith") -> structlog.BoundLogger:
    """Return a named logger, configuring logging on first use."""
    if not _LOGGING_CONFIGURED:
        configure_logging()
    return structlog.get_logger(name)


def operation_context(operation: str, **fields: object) -> AbstractContextManager[Any]:
    """Bind ``operation`` and extra fields to every log event inside the block.

    Args:
        operation: Feature name, e.g. ``merge`` or ``pdf_to_images``.
        **fields: Additional context values.

    Returns:
        AbstractContextManager: Context manager restoring the previous context on exit.
    """
    return structlog.contextvars.bound_contextvars(operation=operation, **fields)
