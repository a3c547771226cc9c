"""Configuration management for the application."""
from pathlib import Path
from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get project root directory
PROJECT_ROOT = Path(__file__).parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    api_version: str = "v1"

    # Azure OpenAI (judge transport)
    azure_openai_endpoint: Optional[str] = None
    azure_openai_api_key: Optional[str] = None
    azure_openai_deployment_name: str = "gpt-4o-mini"
    azure_openai_api_version: str = "2024-12-01-preview"

    # Azure OpenAI reliability
    azure_openai_max_retries: int = 4
    azure_openai_retry_base_seconds: float = 1.0
    azure_openai_retry_max_seconds: float = 20.0

    # Size comparison
    validator_size_tolerance_percent: float = 15.0
    validator_count_slack: float = 1.0

    # Rule classifier thresholds
    validator_rule_pass_threshold: float = 0.8
    validator_rule_fail_threshold: float = 0.3
    validator_rule_confidence_ceiling: float = 0.9

    # Judge merge and cache policy
    validator_judge_min_confidence: float = 0.7
    validator_cache_min_confidence: float = 0.8
    validator_cache_ttl_seconds: float = 86_400.0

    # Judge request shaping
    validator_judge_temperature: float = 0.2
    validator_judge_max_output_tokens: int = 512
    validator_judge_tokens_per_item: int = 64

    # "raise" fails the whole request on a judge outage,
    # "degrade" returns the provisional rule-only outputs instead.
    validator_judge_failure_mode: Literal["raise", "degrade"] = "raise"

    # Optional Azure Identity
    azure_tenant_id: Optional[str] = None
    azure_client_id: Optional[str] = None

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"


# Global settings instance
settings = Settings()
