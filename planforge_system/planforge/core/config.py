"""
Application configuration loader and it handles:
- Environment variables
- Model provider settings
- Model call deadline and retry policy
- Plan extraction / validation switches

And, the main purpose:
Central place for system configuration.
"""


from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # LLM
    LLM_PROVIDER: str = "gemini"  # gemini | mock (for no-key dev)
    GEMINI_API_KEY: str = ""
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    LLM_MODEL: str = "gemini-1.5-flash-latest"

    # Model call policy
    LLM_TIMEOUT_SECONDS: float = 60.0
    LLM_CONNECT_TIMEOUT_SECONDS: float = 10.0
    LLM_MAX_RETRIES: int = 0  # single attempt unless configured
    LLM_RETRY_BACKOFF_SECONDS: float = 0.6

    # Plan handling
    JSON_EXTRACTION: str = "span"  # span | balanced
    REQUIRE_PHASES: bool = False

    # HTTP
    CORS_ALLOW_ORIGIN: str = "*"

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
