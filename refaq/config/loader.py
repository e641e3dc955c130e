"""
Configuration management and loading.

Handles application settings from YAML and the API credential from the environment.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


DEFAULT_CONFIG_PATH = "refaq.yaml"


@dataclass(frozen=True)
class RateLimitConfig:
    """Per-browser question quotas."""
    enabled: bool = True
    daily: int = 15
    hourly: int = 5

    def __post_init__(self):
        """Validate limits are positive."""
        if self.daily <= 0:
            raise ValueError("daily limit must be > 0")
        if self.hourly <= 0:
            raise ValueError("hourly limit must be > 0")


@dataclass(frozen=True)
class RemoteConfig:
    """Chat-completion endpoint settings."""
    base_url: str = "https://api.x.ai/v1"
    model: str = "grok-3-mini"
    api_key_env: str = "XAI_API_KEY"
    timeout: float = 10.0
    max_tokens: int = 150
    temperature: float = 0.7

    def __post_init__(self):
        """Validate remote settings."""
        if not self.base_url or not self.base_url.strip():
            raise ValueError("base_url cannot be empty")
        if not self.model or not self.model.strip():
            raise ValueError("model cannot be empty")
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        if self.max_tokens <= 0:
            raise ValueError("max_tokens must be > 0")
        if not 0 <= self.temperature <= 2:
            raise ValueError("temperature must be between 0 and 2")

    @property
    def api_key(self) -> Optional[str]:
        """API key read from the configured environment variable, if set."""
        value = os.environ.get(self.api_key_env, "").strip()
        return value or None


@dataclass(frozen=True)
class DisplayConfig:
    """Terminal rendering settings."""
    word_delay: float = 0.2

    def __post_init__(self):
        if self.word_delay < 0:
            raise ValueError("word_delay must be >= 0")


@dataclass(frozen=True)
class StorageConfig:
    """Where usage counters are persisted."""
    path: str = ".refaq.db"


@dataclass(frozen=True)
class AppConfig:
    """Complete application configuration."""
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    remote: RemoteConfig = field(default_factory=RemoteConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)


_SECTIONS = {
    'rate_limit': (RateLimitConfig, {'enabled': bool, 'daily': int, 'hourly': int}),
    'remote': (RemoteConfig, {
        'base_url': str,
        'model': str,
        'api_key_env': str,
        'timeout': (int, float),
        'max_tokens': int,
        'temperature': (int, float),
    }),
    'display': (DisplayConfig, {'word_delay': (int, float)}),
    'storage': (StorageConfig, {'path': str}),
}


def load_config(path: Optional[str] = None) -> AppConfig:
    """Load and validate application configuration from a YAML file.

    Every key is optional; missing keys fall back to defaults. Unknown keys
    and wrongly typed values are rejected so a typo never silently disables
    the question quota.

    Args:
        path: Path to YAML configuration file. When None, DEFAULT_CONFIG_PATH
            is used if it exists, otherwise defaults are returned.

    Returns:
        Validated AppConfig object

    Raises:
        FileNotFoundError: If an explicit config path doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    if path is None:
        if not Path(DEFAULT_CONFIG_PATH).exists():
            return AppConfig()
        path = DEFAULT_CONFIG_PATH

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if raw_config is None:
        return AppConfig()
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a mapping")

    unknown_keys = set(raw_config.keys()) - set(_SECTIONS)
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")

    sections = {}
    for name, section_data in raw_config.items():
        sections[name] = _parse_section(name, section_data)

    return AppConfig(**sections)


def _parse_section(name: str, data: Any):
    """Parse and validate one configuration section.

    Args:
        name: Section name, used for error messages
        data: Raw section data

    Returns:
        The section's config dataclass

    Raises:
        ValueError: If the section is invalid
    """
    section_cls, schema = _SECTIONS[name]
    if data is None:
        return section_cls()
    if not isinstance(data, dict):
        raise ValueError(f"'{name}' must be a dictionary")

    unknown_keys = set(data.keys()) - set(schema)
    if unknown_keys:
        raise ValueError(f"Unknown keys in {name}: {unknown_keys}")

    values: Dict[str, Any] = {}
    for key, value in data.items():
        expected = schema[key]
        # bool is an int subclass; only accept it where a bool is expected
        if isinstance(value, bool) and expected is not bool:
            raise ValueError(f"'{name}.{key}' has the wrong type")
        if not isinstance(value, expected):
            raise ValueError(f"'{name}.{key}' has the wrong type")
        values[key] = value

    return section_cls(**values)
