from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    reputation_provider: str = "virustotal"
    reputation_api_key: str = ""
    reputation_base_url: str = "https://www.virustotal.com/api/v3"
    reputation_timeout_seconds: int = 30
    reputation_poll_interval_seconds: float = 3.0
    reputation_max_poll_attempts: int = 5

    max_file_size_mb: int = 15
    max_batch_size_mb: int = 20
    batch_delivery_delay_seconds: float = 1.0
    url_delivery_delay_seconds: float = 0.8
    url_fetch_timeout_seconds: int = 15

    text_max_length: int = 100
    code_max_length: int = 5000
    prompt_max_length: int = 500
