"""Structured logging configuration using structlog.

Every module logs through ``structlog.get_logger(__name__)`` with key-value
events. Output is JSON in production and a colored console otherwise; stdlib
loggers (uvicorn, httpx, redis) are routed through the same formatter so a
single stream carries everything.
"""

import logging
import sys
import uuid

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

APP_NAME = "post-sentiment-pipeline"

# Third-party loggers and the level they are capped at
QUIET_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "redis": logging.WARNING,
    "asyncio": logging.WARNING,
    "uvicorn.access": logging.INFO,
}


def add_app_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Tag every event with the application name."""
    event_dict.setdefault("app", APP_NAME)
    return event_dict


def shared_processors() -> list[Processor]:
    """Processors applied to both structlog and foreign (stdlib) records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
    ]


def select_renderer(environment: str) -> Processor:
    if environment.lower() == "production":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(log_level: str = "INFO", environment: str = "development") -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        environment: "production" selects JSON output
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    processors = shared_processors()
    if environment.lower() == "production":
        processors.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                select_renderer(environment),
            ],
            foreign_pre_chain=processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # uvicorn installs its own handlers; send its records through ours instead
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True

    for name, cap in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(max(cap, level))

    structlog.get_logger(__name__).debug(
        "Logging configured",
        log_level=logging.getLevelName(level),
        environment=environment,
    )


def bind_run_context(operation: str) -> str:
    """Bind a fresh run_id and operation name to the logging context.

    Returns:
        The generated run_id
    """
    run_id = uuid.uuid4().hex[:12]
    structlog.contextvars.bind_contextvars(run_id=run_id, operation=operation)
    return run_id
