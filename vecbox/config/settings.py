"""Environment configuration loaded via pydantic-settings.

Values come from environment variables first, then from a ``.env`` file in
the working directory, then from the defaults below.  Field ``openai_api_key``
maps to env var ``OPENAI_API_KEY`` and so on.

This is the only place vecbox reads credentials from the environment.  The
auto-selector turns these values into ``ProviderConfig.credential``; the
providers themselves never look at the environment.
"""

from __future__ import annotations

import os

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """vecbox settings.

    Empty string means "not configured": the auto-selector skips any
    candidate whose required setting is empty.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Remote embedding APIs ===
    openai_api_key: str = ""
    openai_base_url: str = ""  # OpenAI-compatible gateway (Azure proxy, TogetherAI, ...)
    gemini_api_key: str = ""
    mistral_api_key: str = ""
    deepseek_api_key: str = ""

    # === Local inference ===
    llamacpp_model_path: str = ""  # GGUF file name or path; enables the llama.cpp candidate
    model_search_dirs: str = ""  # extra directories, os.pathsep-separated

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

    def get_model_search_dirs(self) -> list[str]:
        """Return the configured model search directories, blanks removed."""
        return [d for d in self.model_search_dirs.split(os.pathsep) if d.strip()]

    def get_available_embedding_providers(self) -> list[str]:
        """Return provider identifiers whose required settings are present."""
        providers: list[str] = []
        if self.llamacpp_model_path:
            providers.append("llamacpp")
        providers.append("fastembed")
        if self.openai_api_key:
            providers.append("openai")
        if self.gemini_api_key:
            providers.append("gemini")
        if self.mistral_api_key:
            providers.append("mistral")
        if self.deepseek_api_key:
            providers.append("deepseek")
        return providers
