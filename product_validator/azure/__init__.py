"""Azure client initialization module."""
from product_validator.azure.openai_client import OpenAIClient, get_openai_client

__all__ = [
    "OpenAIClient",
    "get_openai_client",
]
