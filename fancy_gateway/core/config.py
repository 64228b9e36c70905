import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Gemini (primary chat provider, google-genai SDK)
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"

    # A4F (OpenAI-compatible, chat backup + image backup)
    a4f_api_key: str = ""
    a4f_base_url: str = "https://api.a4f.co/v1"
    a4f_chat_model: str = "provider-2/nvidia-nemotron-3-nano-30b-a3b-bf16"
    a4f_image_model: str = "provider-4/imagen-4"

    # OpenRouter (chat last resort + primary image provider)
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_chat_model: str = "openrouter/aurora-alpha"
    openrouter_image_model: str = "sourceful/riverflow-v2-fast-preview"

    # Upper bound for a single provider attempt; a hung provider must not block the chain
    provider_timeout_seconds: float = 60.0

    # App
    app_name: str = "Fancy AI"
    app_url: str = "http://localhost:3000"  # sent to OpenRouter as HTTP-Referer
    app_env: str = "development"
    app_debug: bool = True

    # CORS
    allowed_origins: str = "*"  # comma-separated, e.g. "https://app.example.com,https://admin.example.com"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False  # set True in production for structured JSON logs

    # Sentry
    sentry_dsn: str = ""  # leave empty to disable

    @property
    def chat_credentials(self) -> dict[str, str]:
        return {
            "GEMINI_API_KEY": self.gemini_api_key,
            "A4F_API_KEY": self.a4f_api_key,
            "OPENROUTER_API_KEY": self.openrouter_api_key,
        }

    @property
    def image_credentials(self) -> dict[str, str]:
        return {
            "OPENROUTER_API_KEY": self.openrouter_api_key,
            "A4F_API_KEY": self.a4f_api_key,
        }


settings = Settings()


def validate_settings_for_production() -> None:
    """Validate critical settings. Called on startup.

    Missing provider credentials are not errors: the provider simply always
    fails and the chain falls through. A chain with no credentials at all is
    worth a warning though, since every request on it will fail.
    """
    for chain, credentials in (("chat", settings.chat_credentials), ("image", settings.image_credentials)):
        if not any(credentials.values()):
            logger.warning(
                "No %s provider is configured (set one of %s); all %s requests will fail",
                chain,
                ", ".join(credentials),
                chain,
            )

    errors: list[str] = []

    if settings.provider_timeout_seconds <= 0:
        errors.append("PROVIDER_TIMEOUT_SECONDS must be positive")

    if settings.app_env == "production":
        if settings.allowed_origins == "*":
            errors.append("ALLOWED_ORIGINS must not be '*' in production")
        if settings.app_debug:
            errors.append("APP_DEBUG must be false in production")

    if errors:
        raise SystemExit("Configuration errors:\n  - " + "\n  - ".join(errors))
