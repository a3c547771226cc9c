"""Product validation API endpoints."""
from typing import Any, Optional

import structlog
from fastapi import APIRouter, Body, Header
from fastapi.responses import JSONResponse

from product_validator.errors import InvalidPayloadError, UpstreamJudgeError
from product_validator.models import ErrorResponse, ValidateProductsResponse
from product_validator.services.product_validator import get_product_validator, parse_validate_request
from product_validator.utils.logging import bind_request_context, clear_request_context, get_logger

logger = get_logger(__name__)
router = APIRouter()


def _error(status_code: int, message: str, upstream_status: Optional[int] = None) -> JSONResponse:
    body = ErrorResponse(error=message, upstream_status=upstream_status)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@router.post(
    "/validate-products",
    response_model=ValidateProductsResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def validate_products(payload: Any = Body(None), x_request_id: Optional[str] = Header(None)):
    """Classify store candidates against one ingredient spec.

    Request body: `{spec, candidates, model?}`. Returns `{results}` with one
    entry per candidate, in input order.
    """
    bind_request_context(x_request_id)
    try:
        return await _validate(payload)
    finally:
        clear_request_context()


async def _validate(payload: Any):
    try:
        request = parse_validate_request(payload)
    except InvalidPayloadError as e:
        logger.warning("Rejected validation payload", error=str(e))
        return _error(400, str(e))

    structlog.contextvars.bind_contextvars(ingredient=request.spec.name, model=request.model)

    logger.info("Received validation request", count=len(request.candidates))

    try:
        validator = get_product_validator()
        results = await validator.validate(request.spec, request.candidates, model=request.model)
    except UpstreamJudgeError as e:
        logger.error("Judge failure for validation request", status=e.status, error=str(e))
        return _error(502, str(e), upstream_status=e.status)
    except Exception as e:
        logger.error("Validation failed", error=str(e))
        return _error(500, str(e))

    return ValidateProductsResponse(results=results)
