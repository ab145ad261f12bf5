"""Application configuration."""

import os
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Providers sharing another provider's credential
PROVIDER_KEY_ALIASES = {"gemini": "google"}


class Settings(BaseSettings):
    """Settings loaded from environment variables and an optional .env file.

    General options use the ``AUTOL10N_`` prefix (e.g. ``AUTOL10N_MODEL``).
    Provider credentials are read from their conventional variable names
    (``OPENAI_API_KEY``, ``MISTRAL_API_KEY``...).
    """

    # LLM backend
    provider: str = "mistral"
    model: str = "mistral-large-latest"
    temperature: float = 0.0
    max_tokens: Optional[int] = None
    base_url: Optional[str] = None

    # Retry policy for transient provider errors
    max_retries: int = 5
    retry_min_wait: float = 2.0
    retry_max_wait: float = 30.0

    # Bundle naming: <prefix><tag><extension>
    bundle_prefix: str = "app_"
    bundle_extension: str = ".arb"

    # Model response protocol
    final_answer_marker: str = "REPONSE FINALE :"

    # Optional directory with prompt overrides (<dir>/<operation>/system.default.md)
    prompts_dir: Optional[Path] = None

    backup: bool = False
    log_level: str = "INFO"

    # LLM API keys
    mistral_api_key: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("mistral_api_key", "MISTRAL_API_KEY")
    )
    openai_api_key: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("openai_api_key", "OPENAI_API_KEY")
    )
    google_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("google_api_key", "GOOGLE_API_KEY", "GEMINI_API_KEY"),
    )
    anthropic_api_key: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("anthropic_api_key", "ANTHROPIC_API_KEY")
    )
    deepseek_api_key: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("deepseek_api_key", "DEEPSEEK_API_KEY")
    )
    openrouter_api_key: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("openrouter_api_key", "OPENROUTER_API_KEY")
    )

    model_config = SettingsConfigDict(
        env_prefix="AUTOL10N_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def api_key_for(self, provider: str) -> str:
        """Resolve the API key for a provider.

        Falls back to ``<PROVIDER>_API_KEY`` from the process environment for
        providers without a dedicated field. Returns an empty string when no
        key is configured (local backends such as ollama need none).
        """
        provider = provider.lower()
        name = PROVIDER_KEY_ALIASES.get(provider, provider)
        value = getattr(self, f"{name}_api_key", None)
        if value:
            return value
        return os.environ.get(f"{provider.upper()}_API_KEY", "")


settings = Settings()
