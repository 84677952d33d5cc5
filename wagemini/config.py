"""wagemini configuration management."""

import logging
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

logger = logging.getLogger("wagemini.config")


class Settings(BaseSettings):
    """Settings loaded from environment variables or .env file."""

    # Gemini
    gemini_api_key: Optional[str] = Field(default=None, description="Gemini API key")
    gemini_model: str = Field(default="gemini-2.0-flash", description="Gemini chat model")
    temperature: float = Field(default=0.7, description="Sampling temperature")
    top_k: int = Field(default=40, description="Top-k sampling")
    top_p: float = Field(default=0.95, description="Nucleus sampling")
    max_output_tokens: int = Field(default=8192, description="Max tokens per reply")

    # WaSenderAPI
    wasender_api_token: Optional[str] = Field(default=None, description="WaSenderAPI bearer token")
    wasender_api_url: str = Field(
        default="https://wasenderapi.com/api/send-message",
        description="WaSenderAPI send-message endpoint",
    )

    # Storage / persona
    conversations_dir: str = Field(default="conversations", description="Per-user history directory")
    persona_file: str = Field(default="persona.json", description="Persona JSON file")

    # Server
    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=5001, description="Webhook port")
    debug: bool = Field(default=False, description="Debug mode")

    model_config = {"env_prefix": "WAGEMINI_", "env_file": ".env", "extra": "ignore"}


def load_settings() -> Settings:
    """Load settings from environment."""
    settings = Settings()

    if not settings.gemini_api_key:
        logger.error(
            "WAGEMINI_GEMINI_API_KEY is not set. Replies will fall back to a canned apology."
        )
    if not settings.wasender_api_token:
        logger.error(
            "WAGEMINI_WASENDER_API_TOKEN is not set. Outbound WhatsApp messages will fail."
        )

    return settings
