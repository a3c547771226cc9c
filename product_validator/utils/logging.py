"""Structured JSON logging with request-scoped context.

Every record is one JSON object on stdout. Fields bound with
`bind_request_context` (request id, ingredient, model) ride along on every
event logged while a validation request is in flight, including events from
the judge client and the Azure transport.
"""
import logging
import sys
import uuid
from typing import Any, Optional

import structlog
from pythonjsonlogger import jsonlogger

from product_validator.config import settings

SERVICE_NAME = "product-validator"


class ValidatorJsonFormatter(jsonlogger.JsonFormatter):
    """Stamps level, logger, service and environment onto every record."""

    def add_fields(self, log_record: dict[str, Any], record: logging.LogRecord, message_dict: dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["service"] = SERVICE_NAME
        log_record["environment"] = settings.environment


def setup_logging(level: Optional[str] = None) -> None:
    """Route stdlib and structlog output through one JSON handler.

    Args:
        level: Log level name; defaults to `settings.log_level`
    """
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ValidatorJsonFormatter("%(timestamp)s %(level)s %(logger)s %(message)s"))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [handler]

    # The SDK logs every HTTP round trip at INFO.
    for noisy in ("httpx", "openai", "azure.core.pipeline.policies.http_logging_policy"):
        logging.getLogger(noisy).setLevel(max(log_level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.stdlib.render_to_log_kwargs,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def bind_request_context(request_id: Optional[str] = None, **fields: Any) -> str:
    """Start a fresh logging context for one request.

    Args:
        request_id: Caller-supplied id; a random one is generated if omitted
        **fields: Extra fields to attach (ingredient, model, ...)

    Returns:
        The request id now bound to the context
    """
    request_id = request_id or uuid.uuid4().hex[:12]
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, **fields)
    return request_id


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance for the given name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
