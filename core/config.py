from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Literal, Optional


class Settings(BaseSettings):
    app_name: str = "LawWise API"
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    # LLM providers (Groq is tried first, OpenAI is the fallback)
    GROQ_API_KEY: Optional[str] = None
    OPENAI_API_KEY: Optional[str] = None

    # CORS
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])

    # File Upload Settings
    MAX_FILE_SIZE_MB: int = 10
    ALLOWED_EXTENSIONS: List[str] = [".pdf"]

    # Document sessions
    SESSION_TTL_MINUTES: int = 30
    CONTEXT_STORE_BACKEND: Literal["memory", "redis"] = "memory"
    REDIS_URL: str = "redis://localhost:6379/0"

    # Model Settings
    CHAT_MODEL: str = "llama-3.3-70b-versatile"
    FALLBACK_CHAT_MODEL: str = "gpt-4o-mini"
    TRANSLATION_MODEL: str = "llama-3.1-8b-instant"
    TEMPERATURE: float = 0.3
    MAX_TOKENS: int = 1024

    # Translation
    TRANSLATION_ENABLED: bool = True
    DEFAULT_LANGUAGE: str = "en"

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @property
    def session_ttl_seconds(self) -> float:
        return self.SESSION_TTL_MINUTES * 60


settings = Settings()
