"""
Configuration for the ADCortex clients.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .ad_cache import DEFAULT_CONTEXT_TEMPLATE
from .exceptions import ConfigurationError

AD_FETCH_URL = "https://adcortex.3102labs.com/ads/matchv2"
AD_MATCH_URL = "https://adcortex.3102labs.com/ads/match"
API_KEY_ENV = "ADCORTEX_API_KEY"


@dataclass
class ClientConfig:
    """Settings shared by the chat clients."""

    api_key: str | None = None
    api_key_env: str = API_KEY_ENV
    base_url: str = AD_FETCH_URL
    context_template: str = DEFAULT_CONTEXT_TEMPLATE
    timeout_seconds: float | None = None  # None uses the client's default
    retries: int = 3  # connection retries handled by the HTTP transport
    disable_logging: bool = False
    max_queue_size: int = 100
    circuit_breaker_threshold: int = 5
    circuit_breaker_timeout: float = 120.0  # 2 minutes

    def get_api_key(self) -> str | None:
        """Get API key from config or environment."""
        if self.api_key:
            return self.api_key
        if self.api_key_env:
            return os.environ.get(self.api_key_env) or None
        return None

    def resolve_api_key(self) -> str:
        """Like get_api_key, but a missing key is a configuration error."""
        api_key = self.get_api_key()
        if not api_key:
            raise ConfigurationError(f"{self.api_key_env} is not set and no api_key was provided")
        return api_key

    def validate(self) -> None:
        """Reject settings the client cannot run with."""
        if self.max_queue_size < 1:
            raise ConfigurationError("max_queue_size must be at least 1")
        if self.circuit_breaker_threshold < 1:
            raise ConfigurationError("circuit_breaker_threshold must be at least 1")
        if self.circuit_breaker_timeout < 0:
            raise ConfigurationError("circuit_breaker_timeout must not be negative")
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ConfigurationError("timeout_seconds must be positive")
        if self.retries < 0:
            raise ConfigurationError("retries must not be negative")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ClientConfig":
        """Create config from a dictionary (e.g., from YAML)."""
        config = cls()

        if "api_key" in data:
            config.api_key = data["api_key"]
        if "api_key_env" in data:
            config.api_key_env = data["api_key_env"]
        if "base_url" in data:
            config.base_url = data["base_url"]
        if "context_template" in data:
            config.context_template = data["context_template"]
        if "timeout_seconds" in data:
            config.timeout_seconds = float(data["timeout_seconds"])
        if "retries" in data:
            config.retries = int(data["retries"])
        if "disable_logging" in data:
            config.disable_logging = bool(data["disable_logging"])

        if "queue" in data:
            queue = data["queue"] or {}
            config.max_queue_size = int(queue.get("max_size", config.max_queue_size))

        if "circuit_breaker" in data:
            cb = data["circuit_breaker"] or {}
            config.circuit_breaker_threshold = int(
                cb.get("threshold", config.circuit_breaker_threshold)
            )
            config.circuit_breaker_timeout = float(
                cb.get("timeout_seconds", config.circuit_breaker_timeout)
            )

        config.validate()
        return config

    @classmethod
    def from_yaml(cls, path: Path) -> "ClientConfig":
        """Load config from the ``adcortex`` section of a YAML file."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data.get("adcortex", {}) or {})

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for JSON serialization (without the API key)."""
        return {
            "api_key_env": self.api_key_env,
            "base_url": self.base_url,
            "context_template": self.context_template,
            "timeout_seconds": self.timeout_seconds,
            "retries": self.retries,
            "disable_logging": self.disable_logging,
            "queue": {"max_size": self.max_queue_size},
            "circuit_breaker": {
                "threshold": self.circuit_breaker_threshold,
                "timeout_seconds": self.circuit_breaker_timeout,
            },
        }
