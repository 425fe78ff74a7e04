import os
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

DEFAULT_MODELS = {
    "anthropic": "claude-sonnet-4-5",
    "openai": "gpt-4o",
    "gemini": "gemini-2.0-flash-001",
}


class Settings(BaseModel):
    app_name: str = "TaskFlow AI"
    app_env: str = "production"
    log_level: str = "INFO"
    database_path: str = "taskflow.db"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:5000"]

    llm_provider: Literal["anthropic", "openai", "gemini"] = "anthropic"
    llm_model: Optional[str] = None
    llm_timeout_seconds: float = 30.0

    anthropic_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"

    @property
    def model(self) -> str:
        return self.llm_model or DEFAULT_MODELS[self.llm_provider]

    @property
    def api_key(self) -> Optional[str]:
        """API key of the selected provider, None if unset or left as the placeholder."""
        key = getattr(self, f"{self.llm_provider}_api_key")
        if not key or key == "your-api-key-here":
            return None
        return key


def load_settings() -> Settings:
    """Build settings from the process environment (and .env, if present)."""
    load_dotenv()

    values = {
        "app_env": os.getenv("APP_ENV"),
        "log_level": os.getenv("LOG_LEVEL"),
        "database_path": os.getenv("DATABASE_PATH"),
        "llm_provider": os.getenv("LLM_PROVIDER"),
        "llm_model": os.getenv("LLM_MODEL"),
        "llm_timeout_seconds": os.getenv("LLM_TIMEOUT_SECONDS"),
        "anthropic_api_key": os.getenv("ANTHROPIC_API_KEY"),
        "openai_api_key": os.getenv("OPENAI_API_KEY"),
        "gemini_api_key": os.getenv("GEMINI_API_KEY"),
    }
    origins = os.getenv("CORS_ORIGINS")
    if origins:
        values["cors_origins"] = [o.strip() for o in origins.split(",") if o.strip()]

    # Unset variables fall back to the model defaults
    return Settings(**{k: v for k, v in values.items() if v is not None})
