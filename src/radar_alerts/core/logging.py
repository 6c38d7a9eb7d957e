"""Structured logging for radar-alerts.

structlog and standard library records share one processor chain, so the
notification handlers (stdlib loggers) and the engine (structlog) render the
same way. Rule runs and sweeps bind the client they work on with
``bind_client_context`` and every record inside carries it.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from radar_alerts import __version__
from radar_alerts.core.config import get_settings

SERVICE_NAME = "radar-alerts"

# Third-party loggers that only log per request or per connection.
QUIET_LOGGERS = ("uvicorn.access", "aiosmtplib", "aiohttp.access")


def add_service_info(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Stamp records with the service name and version."""
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("version", __version__)
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_service_info,
        structlog.processors.StackInfoRenderer(),
    ]


def setup_logging() -> None:
    """Configure structlog and route stdlib logging through it."""
    settings = get_settings()
    json_output = settings.log_format == "json"

    output_processors: list[Processor] = [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
    ]
    if json_output:
        output_processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        output_processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_shared_processors(),
            processors=output_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(settings.log_level.upper())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


@contextmanager
def bind_client_context(client_id: str, **values: Any) -> Iterator[None]:
    """Bind ``client_id`` (and extra keys) to every record in the block.

    Bindings are context-local, so concurrent runs for different clients do
    not see each other's values. Previous bindings are restored on exit.

    Args:
        client_id: Client the block works on.
        **values: Extra keys, for example ``operation="hallucination_sweep"``.
    """
    with structlog.contextvars.bound_contextvars(client_id=client_id, **values):
        yield


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
