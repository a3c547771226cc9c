"""Health check endpoints."""
from fastapi import APIRouter

from product_validator.models import HealthResponse
from product_validator.azure import get_openai_client
from product_validator.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint.

    Returns:
        HealthResponse with the judge transport status
    """
    logger.info("Performing health check")

    services_status = {"openai": False}

    try:
        openai_client = get_openai_client()
        services_status["openai"] = await openai_client.health_check()
    except Exception as e:
        logger.error("OpenAI health check error", error=str(e))

    status = "healthy" if all(services_status.values()) else "degraded"

    logger.info("Health check completed", status=status, services=services_status)

    return HealthResponse(
        status=status,
        services=services_status
    )
