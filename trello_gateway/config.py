from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

class Settings(BaseSettings):
    # App
    APP_NAME: str = "Trello MCP"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Trello
    TRELLO_API_KEY: str = ""
    TRELLO_TOKEN: str = ""
    TRELLO_API_BASE: str = "https://api.trello.com/1"
    TRELLO_TIMEOUT_SECONDS: float | None = None

    # Security
    SHARED_SECRET: str = ""

    # MCP
    MCP_LOG_LEVEL: str = "INFO"
    SSE_PING_INTERVAL_SECONDS: float = 30.0

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

@lru_cache()
def get_settings() -> Settings:
    return Settings()
