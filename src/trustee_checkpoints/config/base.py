"""
Base configuration for checkpoint storage.

Settings are read only at the outermost layer (the CLI). Core components
receive an explicit StorageRoot instead of consulting settings themselves.
"""

from __future__ import annotations

import os
import pathlib
from typing import TypeVar

import lazy_object_proxy
import pydantic
import pydantic_settings

T = TypeVar('T', bound='BaseCheckpointSettings')


def _default_storage_root() -> pathlib.Path:
    return pathlib.Path.home() / '.trustee' / 'checkpoints'


class BaseCheckpointSettings(pydantic_settings.BaseSettings):
    """Shared configuration for checkpoint storage consumers."""

    model_config = pydantic_settings.SettingsConfigDict(
        env_prefix='TRUSTEE_',
        env_file_encoding='utf-8',
        case_sensitive=True,  # Fail fast on misconfiguration
        extra='forbid',  # Reject unknown settings
    )

    # Application metadata
    APP_NAME: str = 'trustee-checkpoints'
    VERSION: str = '0.1.0'

    # Storage
    STORAGE_ROOT: pathlib.Path = pydantic.Field(default_factory=_default_storage_root)

    # Git remote discovery at project registration
    DETECT_GIT_REMOTE: bool = True
    GIT_TIMEOUT_SECONDS: float = 2.0

    @pydantic.field_validator('STORAGE_ROOT')
    @classmethod
    def expand_storage_root(cls, v: pathlib.Path) -> pathlib.Path:
        """Expand ~ so the root is usable as given in .env files."""
        return v.expanduser()

    @pydantic.field_validator('GIT_TIMEOUT_SECONDS')
    @classmethod
    def validate_git_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError('GIT_TIMEOUT_SECONDS must be positive')
        return v


def get_settings(settings_class: type[T], env_file: str | None = None) -> T:
    """
    Factory for creating settings with dynamic .env file loading.

    LOAD_ENV_FILE environment variable specifies custom .env file path.
    When unset, loads from environment variables only.

    Args:
        settings_class: Settings class to instantiate
        env_file: Optional path to .env file (overrides LOAD_ENV_FILE)

    Returns:
        Settings instance

    Raises:
        FileNotFoundError: If specified .env file doesn't exist
    """
    env_file_path = env_file or os.getenv('LOAD_ENV_FILE')

    if not env_file_path:
        return settings_class()  # No .env file, load from environment only

    resolved_path = pathlib.Path(env_file_path).resolve()
    if not resolved_path.exists():
        raise FileNotFoundError(f'Environment file not found: {resolved_path}')

    return settings_class(_env_file=resolved_path)


def lazy_settings(settings_class: type[T]) -> T:
    """
    Lazy settings - defers instantiation until first access.

    Args:
        settings_class: Settings class to instantiate

    Returns:
        Proxy that instantiates settings on first access
    """
    return lazy_object_proxy.Proxy(lambda: get_settings(settings_class))
