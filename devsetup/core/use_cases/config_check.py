"""
Config check use case — validate the settings file and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from devsetup.core.config.loader import ConfigError, find_settings_file, load_settings
from devsetup.core.models.settings import Settings
from devsetup.core.services.tools.catalog import BUILTIN_PLUGINS, PLUGIN_SOURCES


@dataclass
class ConfigCheckResult:
    """Result of settings validation."""

    valid: bool = False
    settings: Settings | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "settings": self.settings.model_dump(mode="json") if self.settings else None,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate settings and report issues.

    Args:
        config_path: Optional explicit settings path.

    Returns:
        ConfigCheckResult; ``valid`` is True with defaults when no file exists.
    """
    result = ConfigCheckResult()
    path = find_settings_file(config_path)
    result.config_path = path

    try:
        settings = load_settings(path)
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    result.settings = settings
    result.valid = True

    if path is None:
        result.warnings.append("No settings file found; using built-in defaults.")

    # Semantic checks
    zsh = settings.zsh
    if not zsh.plugins:
        result.warnings.append("zsh.plugins is empty; .zshrc will declare no plugins.")

    unknown = [
        p for p in zsh.plugins if p not in PLUGIN_SOURCES and p not in BUILTIN_PLUGINS
    ]
    if unknown:
        result.warnings.append(
            f"No clone source for plugins {', '.join(unknown)}; "
            "they must ship with Oh My Zsh."
        )

    dupes = sorted({p for p in zsh.plugins if zsh.plugins.count(p) > 1})
    if dupes:
        result.warnings.append(f"Duplicate plugins: {', '.join(dupes)}")

    if not Path(settings.os_release).expanduser().is_file():
        result.warnings.append(f"{settings.os_release} does not exist; the host will be unknown.")

    return result
