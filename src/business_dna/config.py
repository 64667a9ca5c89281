"""Configuration management for business-dna."""

from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Profile cache
    PROFILE_STALENESS_SECONDS: int = Field(
        default=3600, ge=0, description="Age after which a cached profile is rebuilt"
    )
    REFRESH_INTERVAL_SECONDS: int = Field(
        default=3600, gt=0, description="Background profile refresh period"
    )
    FETCH_TIMEOUT_SECONDS: float = Field(
        default=20.0, gt=0, description="Timeout for each record-type fetch"
    )
    FEEDBACK_FETCH_LIMIT: int = Field(default=500, gt=0)
    POST_FETCH_LIMIT: int = Field(default=100, gt=0)
    QUESTION_FETCH_LIMIT: int = Field(default=100, gt=0)

    # Conversation
    HISTORY_WINDOW: int = Field(default=50, gt=0, description="Messages loaded into context")
    MEMORY_TOP_K: int = Field(default=10, gt=0, description="Memories embedded in the prompt")
    PROVIDER_TIMEOUT_SECONDS: float = Field(
        default=30.0, gt=0, description="Timeout for a single provider call"
    )

    # Providers
    DEFAULT_PROVIDER: Optional[str] = Field(
        default=None, description="Provider used when the operator has no preference"
    )
    PROVIDER_PRIORITY: List[str] = Field(
        default_factory=lambda: ["anthropic", "openai", "gemini", "groq", "deepseek", "openrouter"],
        description="Resolution order when no provider is chosen",
    )
    OPENAI_API_KEY: Optional[SecretStr] = None
    ANTHROPIC_API_KEY: Optional[SecretStr] = None
    GOOGLE_AI_API_KEY: Optional[SecretStr] = None
    GROQ_API_KEY: Optional[SecretStr] = None
    DEEPSEEK_API_KEY: Optional[SecretStr] = None
    OPENROUTER_API_KEY: Optional[SecretStr] = None
    OPENROUTER_REFERER: str = Field(default="https://localhost", description="HTTP-Referer header")
    OLLAMA_BASE_URL: str = Field(default="http://localhost:11434")
    PROVIDER_TEMPERATURE: float = Field(default=0.7, ge=0.0, le=2.0)
    PROVIDER_MAX_TOKENS: int = Field(default=2000, gt=0)

    # Storage
    DATABASE_URL: str = Field(default="sqlite:///business_dna.db")
    REDIS_URL: Optional[str] = None

    def credential_for(self, provider: str) -> Optional[SecretStr]:
        """Credential configured for a provider, if any."""
        env_name = PROVIDER_CREDENTIAL_ENV.get(provider)
        if env_name is None:
            return None
        return getattr(self, env_name)


PROVIDER_CREDENTIAL_ENV = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "gemini": "GOOGLE_AI_API_KEY",
    "groq": "GROQ_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
}


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
