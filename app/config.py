import os
import logging
from pydantic_settings import BaseSettings
from typing import Optional
from openai import OpenAI


class Settings(BaseSettings):
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./health_trends.db")

    # xAI (OpenAI-compatible) narrative for the cancer risk block
    XAI_API_KEY: Optional[str] = os.getenv("XAI_API_KEY")
    XAI_BASE_URL: str = os.getenv("XAI_BASE_URL", "https://api.x.ai/v1")
    XAI_MODEL: str = os.getenv("XAI_MODEL", "grok-2-1212")

    # The patient route serves the hand-authored demo report unless this is off
    HEALTH_PREDICTION_DEMO_MODE: bool = os.getenv("HEALTH_PREDICTION_DEMO_MODE", "true").lower() == "true"
    PREDICTION_RANDOM_SEED: Optional[int] = None

    CORS_ORIGINS: list = ["http://localhost:5000", "http://127.0.0.1:5000"]

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    def is_ai_analysis_enabled(self) -> bool:
        return bool(self.XAI_API_KEY)

    class Config:
        env_file = ".env"


settings = Settings()


def get_ai_client() -> Optional[OpenAI]:
    """
    Get an OpenAI SDK client pointed at the xAI endpoint.
    Returns None when no XAI_API_KEY is configured.
    """
    if not settings.is_ai_analysis_enabled():
        return None

    return OpenAI(base_url=settings.XAI_BASE_URL, api_key=settings.XAI_API_KEY)


def check_ai_analysis_configuration() -> bool:
    """Log whether AI narratives are available - uses secure logging"""
    logger = logging.getLogger(__name__)

    if not settings.is_ai_analysis_enabled():
        logger.warning("XAI_API_KEY not set. Cancer risk narratives will use the default assessment text.")
        return False
    return True
