"""Configuration management for the translator LLM transport."""

import os
from typing import Any

import yaml
from dotenv import load_dotenv

from .llm.exceptions import UnsupportedProviderError
from .llm.models import (
    DEFAULT_BASE_URL,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_TOTAL_TIMEOUT,
    ProviderConfig,
)

SUPPORTED_PROVIDERS = ("ollama",)


class Configuration:
    """Manages configuration and environment variables for the LLM client."""

    def __init__(self, config_path: str | None = None) -> None:
        """Initialize configuration from YAML and environment variables.

        Args:
            config_path: YAML file to load. Defaults to the packaged
                ``config.yaml``.
        """
        self.load_env()  # Load .env for API keys
        self.config_path = config_path or os.path.join(
            os.path.dirname(__file__), "config.yaml"
        )
        self._config = self._load_yaml_config(self.config_path)

    @staticmethod
    def load_env() -> None:
        """Load environment variables from .env file."""
        load_dotenv()

    @staticmethod
    def _load_yaml_config(config_path: str) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(config_path) as file:
            config = yaml.safe_load(file)
            if not isinstance(config, dict):
                raise ValueError(
                    f"Config file must be YAML dict, got {type(config)}"
                )
            return config

    @property
    def active_provider(self) -> str:
        return str(self._config.get("llm", {}).get("active", "ollama")).lower()

    @property
    def llm_api_key(self) -> str | None:
        """Get the optional bearer credential for the active provider.

        Ollama does not require a key, so a missing variable yields None.
        """
        return os.getenv(f"{self.active_provider.upper()}_API_KEY") or None

    def get_llm_config(self) -> dict[str, Any]:
        """Get active LLM provider configuration from YAML.

        Returns:
            Active LLM provider configuration dictionary.

        Raises:
            UnsupportedProviderError: If the active provider has no transport.
            ValueError: If the active provider has no configuration block.
        """
        active_provider = self.active_provider
        if active_provider not in SUPPORTED_PROVIDERS:
            raise UnsupportedProviderError(
                f"Provider {active_provider} is not supported.",
                provider=active_provider,
            )

        providers = self._config.get("llm", {}).get("providers", {})
        if active_provider not in providers:
            raise ValueError(
                f"Active provider '{active_provider}' not found in providers config"
            )

        return providers[active_provider]

    def get_provider_config(self) -> ProviderConfig:
        """Build the explicit client configuration for the active provider.

        ``OLLAMA_BASE_URL`` in the environment overrides the YAML base URL.

        Raises:
            ValueError: If a timeout is not a positive number.
        """
        llm_config = self.get_llm_config()

        base_url = (
            os.getenv(f"{self.active_provider.upper()}_BASE_URL")
            or llm_config.get("base_url")
            or DEFAULT_BASE_URL
        )
        connect_timeout = llm_config.get("connect_timeout", DEFAULT_CONNECT_TIMEOUT)
        total_timeout = llm_config.get("total_timeout", DEFAULT_TOTAL_TIMEOUT)

        for name, value in (
            ("connect_timeout", connect_timeout),
            ("total_timeout", total_timeout),
        ):
            if isinstance(value, bool) or not isinstance(value, int | float) or value <= 0:
                raise ValueError(f"{name} must be a positive number")

        return ProviderConfig(
            base_url=base_url,
            api_key=self.llm_api_key,
            model=llm_config.get("model"),
            connect_timeout=float(connect_timeout),
            total_timeout=float(total_timeout),
        )

    def get_logging_config(self) -> dict[str, Any]:
        """Get logging configuration from YAML.

        Returns:
            Logging configuration dictionary.
        """
        return self._config.get("logging", {})
