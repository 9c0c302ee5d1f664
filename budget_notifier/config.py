"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Completion endpoint (OpenAI-compatible)
    ai_api_key: str = ""
    ai_base_url: str = "https://api.kluster.ai/v1"
    ai_model: str = "klusterai/Meta-Llama-2-7B-Instruct"

    # HTTP Client
    ai_timeout_seconds: float = 5.0
    ai_max_retries: int = 2
    ai_backoff_base: float = 0.5  # Exponential backoff base in seconds

    # Service
    service_name: str = "budget-notifier"
    log_level: str = "INFO"

    # Transaction snapshot freshness window
    transaction_cache_ttl_seconds: float = 300.0


settings = Settings()
