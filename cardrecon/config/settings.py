from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    ocr_provider: str = "http"
    ocr_base_url: str = "http://localhost:8080"
    ocr_timeout_seconds: int = 60

    validation_mode: str = "luhn"

    composite_jpeg_quality: int = 90
    redaction_jpeg_quality: int = 95
    cvc_expand_width: float = 4.0
    cvc_expand_height: float = 2.0
