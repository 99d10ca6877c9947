"""
Configuration loader — reads config.yml into the Settings model.

The file is optional. Lookup order:

    --config flag  >  DEVSETUP_CONFIG env var  >  ~/.config/devsetup/config.yml

When nothing is found the defaults from ``Settings`` apply.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

from devsetup.core.errors import DevSetupError
from devsetup.core.models.settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("~/.config/devsetup/config.yml")


class ConfigError(DevSetupError):
    """Raised when the settings file is invalid or unreadable."""


def find_settings_file(explicit: Path | None = None) -> Path | None:
    """Resolve which settings file to use.

    An explicit path is returned as-is, even when it does not exist, so
    that ``load_settings`` can report it. The env var and default
    location are only used when they point at a real file.
    """
    if explicit is not None:
        return explicit

    env_path = os.environ.get("DEVSETUP_CONFIG")
    if env_path:
        return Path(env_path).expanduser()

    default = DEFAULT_CONFIG_FILE.expanduser()
    if default.is_file():
        return default

    return None


def load_settings(path: Path | None = None) -> Settings:
    """Load and validate settings.

    Args:
        path: Settings file path. ``None`` means "use defaults".

    Returns:
        Validated Settings model.

    Raises:
        ConfigError: If the file is missing, unreadable, or invalid.
    """
    if path is None:
        logger.debug("No settings file — using defaults")
        return Settings()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Settings()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = Settings.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.info("Loaded settings from %s", path)
    return settings
