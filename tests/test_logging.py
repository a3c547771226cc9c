import json
import logging

import structlog


def test_bind_request_context_replaces_previous_fields() -> None:
    from product_validator.utils.logging import bind_request_context, clear_request_context

    bind_request_context("first", ingredient="milk")
    request_id = bind_request_context("second", ingredient="flour")

    assert request_id == "second"
    assert structlog.contextvars.get_contextvars() == {"request_id": "second", "ingredient": "flour"}

    clear_request_context()
    assert structlog.contextvars.get_contextvars() == {}


def test_bind_request_context_generates_an_id() -> None:
    from product_validator.utils.logging import bind_request_context, clear_request_context

    request_id = bind_request_context()

    assert len(request_id) == 12
    assert structlog.contextvars.get_contextvars()["request_id"] == request_id
    clear_request_context()


def test_json_formatter_stamps_service_fields() -> None:
    from product_validator.config import settings
    from product_validator.utils.logging import SERVICE_NAME, ValidatorJsonFormatter

    formatter = ValidatorJsonFormatter("%(timestamp)s %(level)s %(logger)s %(message)s")
    record = logging.LogRecord("product_validator.test", logging.WARNING, __file__, 1, "judge slow", None, None)

    data = json.loads(formatter.format(record))

    assert data["message"] == "judge slow"
    assert data["level"] == "WARNING"
    assert data["logger"] == "product_validator.test"
    assert data["service"] == SERVICE_NAME
    assert data["environment"] == settings.environment


def test_setup_logging_quietens_http_client_loggers() -> None:
    from product_validator.utils.logging import setup_logging

    setup_logging("DEBUG")

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING
    setup_logging()
