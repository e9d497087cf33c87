"""
Application configuration loader and it handles:
- Environment variables
- LLM gateway settings
- Retry budgets for the gateway and for pipeline steps
- Logging level

And, the main purpose:
Central place for system configuration.
"""


from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # LLM
    LLM_PROVIDER: str = "openrouter"  # openrouter | mock (for no-key dev)
    OPENROUTER_API_KEY: str = ""
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"
    LLM_MODEL: str = "mistralai/mistral-7b-instruct:free"
    LLM_TEMPERATURE: float = 0.7
    LLM_MAX_TOKENS: int = 2000
    LLM_TIMEOUT_S: float = 40.0
    LLM_CONNECT_TIMEOUT_S: float = 10.0

    # Sent to OpenRouter for attribution
    APP_REFERER: str = "https://mindforge.lovable.app"
    APP_TITLE: str = "MindForge Planning Agent"

    # Retry budgets
    GATEWAY_MAX_ATTEMPTS: int = 3
    GATEWAY_BASE_DELAY_S: float = 1.0
    STEP_MAX_ATTEMPTS: int = 3
    STEP_BASE_DELAY_S: float = 1.0

    LOG_LEVEL: str = "INFO"
    HOST: str = "127.0.0.1"
    PORT: int = 8000
    CORS_ALLOW_ORIGINS: str = "*"

settings = Settings()
