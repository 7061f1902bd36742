from functools import lru_cache
from typing import Dict, Optional
import os

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ModelSource(BaseModel):
    """Locations of a model artifact and its metadata JSON."""
    model_url: str
    metadata_url: str


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Service information
    SERVICE_NAME: str = "intent-bot"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"

    # Logging configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    # Dispatch policy
    THRESHOLD_SCORE: float = 0.90
    LOCATION_SLOT_LABEL_INDEX: int = 1
    LOCATION_SLOT_LABEL: Optional[str] = None
    PADDING_DISPLAY_LABEL_INDEX: int = 2

    # Embedding configuration
    EMBEDDING_MODEL_NAME: str = "sentence-transformers/distiluse-base-multilingual-cased-v2"
    EMBEDDING_DIMENSION: int = 512
    EMBEDDING_BATCH_SIZE: int = 32
    EMBEDDING_USE_CACHE: bool = False

    # Model artifacts
    MODEL_BASE_URL: str = "http://localhost:8080/models"
    INTENT_MODEL_NAME: str = "intent"
    TAGGER_MODEL_NAME: str = "bidirectional-lstm"
    MODEL_SOURCES: Dict[str, ModelSource] = {}
    ARTIFACT_TIMEOUT_SECONDS: float = 30.0
    ARTIFACT_MAX_RETRIES: int = 3

    # Weather collaborator
    WEATHER_API_URL: str = "https://www.metaweather.com/api"
    WEATHER_TIMEOUT_SECONDS: float = 10.0
    WEATHER_MAX_RETRIES: int = 3

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @field_validator("THRESHOLD_SCORE")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        """Validate that the threshold is a probability."""
        if not 0.0 <= v <= 1.0:
            raise ValueError("THRESHOLD_SCORE must be between 0 and 1")
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ("json", "text"):
            raise ValueError("LOG_FORMAT must be 'json' or 'text'")
        return v.lower()

    def model_sources(self) -> Dict[str, ModelSource]:
        """
        Resolve artifact locations for every known model.

        Defaults follow the layout the models are published with under
        MODEL_BASE_URL; entries in MODEL_SOURCES take precedence.

        Returns:
            Mapping of model name to its artifact locations
        """
        base = self.MODEL_BASE_URL.rstrip("/")
        sources = {
            self.INTENT_MODEL_NAME: ModelSource(
                model_url=f"{base}/intent/model.joblib",
                metadata_url=f"{base}/intent/intent_metadata.json"
            ),
            self.TAGGER_MODEL_NAME: ModelSource(
                model_url=f"{base}/bidirectional-tagger/model.joblib",
                metadata_url=f"{base}/bidirectional-tagger/tagger_metadata.json"
            ),
        }
        sources.update(self.MODEL_SOURCES)
        return sources


def load_env_file() -> None:
    """Load environment variables from .env file if it exists."""
    env_path = os.path.join(os.getcwd(), ".env")
    if os.path.exists(env_path):
        load_dotenv(dotenv_path=env_path)


@lru_cache
def get_settings() -> Settings:
    """
    Create and cache application settings.

    Returns:
        Settings: Application settings instance
    """
    load_env_file()
    return Settings()
