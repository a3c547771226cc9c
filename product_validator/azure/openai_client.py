"""Azure OpenAI client wrapper with Entra ID or API-key authentication."""
import random
import time
from typing import Optional
from azure.identity import DefaultAzureCredential, get_bearer_token_provider
from openai import AzureOpenAI
from openai import APIConnectionError, APITimeoutError, APIStatusError, RateLimitError

from product_validator.config import settings
from product_validator.utils.logging import get_logger

logger = get_logger(__name__)

COGNITIVE_SERVICES_SCOPE = "https://cognitiveservices.azure.com/.default"
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class OpenAIClient:
    """Wrapper for the Azure OpenAI client used by the batch judge."""

    def __init__(self):
        """Defer client construction until the first call."""
        self._client: Optional[AzureOpenAI] = None

    @property
    def client(self) -> AzureOpenAI:
        """Get or create Azure OpenAI client instance.

        Uses the configured API key when present, otherwise an
        auto-refreshing Entra ID token from DefaultAzureCredential.

        Returns:
            Configured AzureOpenAI client

        Raises:
            RuntimeError: If no endpoint is configured
        """
        if self._client is None:
            if not settings.azure_openai_endpoint:
                raise RuntimeError("AZURE_OPENAI_ENDPOINT is not set")

            if settings.azure_openai_api_key:
                logger.info("Initializing Azure OpenAI client with API key", endpoint=settings.azure_openai_endpoint)
                self._client = AzureOpenAI(
                    azure_endpoint=settings.azure_openai_endpoint,
                    api_key=settings.azure_openai_api_key,
                    api_version=settings.azure_openai_api_version,
                    max_retries=0,
                )
            else:
                logger.info("Initializing Azure OpenAI client with auto-refreshing token", endpoint=settings.azure_openai_endpoint)
                token_provider = get_bearer_token_provider(
                    DefaultAzureCredential(),
                    COGNITIVE_SERVICES_SCOPE,
                )
                self._client = AzureOpenAI(
                    azure_endpoint=settings.azure_openai_endpoint,
                    azure_ad_token_provider=token_provider,
                    api_version=settings.azure_openai_api_version,
                    max_retries=0,
                )

            logger.info("Azure OpenAI client initialized successfully")

        return self._client

    async def health_check(self) -> bool:
        """Check if the Azure OpenAI client can be constructed.

        Returns:
            True if service is reachable in principle, False otherwise
        """
        try:
            _ = self.client
            logger.info("Azure OpenAI health check passed")
            return True
        except Exception as e:
            logger.error("Azure OpenAI health check failed", error=str(e))
            return False

    def chat_completions_create(self, **kwargs):
        """Create a chat completion with retry/backoff for transient errors.

        Retries:
        - 429 (RateLimit / NoCapacity)
        - 5xx (service transient)
        - timeouts / connection errors

        Notes:
        - Blocking; async callers run it through asyncio.to_thread.
        - Non-retryable status errors are raised on the first attempt.
        """
        max_attempts = max(1, int(settings.azure_openai_max_retries))
        base_delay = max(0.1, float(settings.azure_openai_retry_base_seconds))
        max_delay = max(base_delay, float(settings.azure_openai_retry_max_seconds))

        last_error: Optional[Exception] = None

        for attempt in range(1, max_attempts + 1):
            try:
                return self.client.chat.completions.create(**kwargs)
            except (RateLimitError, APIStatusError, APITimeoutError, APIConnectionError) as e:
                last_error = e

                status_code = getattr(e, "status_code", None)
                is_no_capacity = "NoCapacity" in str(e)
                is_transport_error = isinstance(e, APIConnectionError)
                is_retryable_status = status_code in RETRYABLE_STATUS_CODES

                if attempt >= max_attempts or not (is_retryable_status or is_no_capacity or is_transport_error):
                    raise

                retry_after_seconds: Optional[float] = None
                response = getattr(e, "response", None)
                headers = getattr(response, "headers", None)
                if headers is not None:
                    retry_after_value = headers.get("retry-after")
                    if retry_after_value is not None:
                        try:
                            retry_after_seconds = float(retry_after_value)
                        except ValueError:
                            retry_after_seconds = None

                backoff = min(max_delay, base_delay * (2 ** (attempt - 1)))
                delay = retry_after_seconds if retry_after_seconds is not None else backoff
                # Add jitter to reduce thundering herd
                delay = min(max_delay, delay + random.uniform(0, delay * 0.25))

                logger.warning(
                    "Azure OpenAI call failed; retrying",
                    attempt=attempt,
                    max_attempts=max_attempts,
                    status_code=status_code,
                    no_capacity=is_no_capacity,
                    sleep_seconds=delay,
                )
                time.sleep(delay)

        if last_error is not None:
            raise last_error
        raise RuntimeError("Azure OpenAI call failed with unknown error")


# Global singleton instance
_openai_client: Optional[OpenAIClient] = None


def get_openai_client() -> OpenAIClient:
    """Get the global OpenAI client instance.

    Returns:
        OpenAIClient singleton
    """
    global _openai_client
    if _openai_client is None:
        _openai_client = OpenAIClient()
    return _openai_client
