"""Configuration for skillwisp.

Settings come from three layers, later ones winning:

1. built-in defaults
2. ``~/.agents/.skillwisp/config.toml`` (optional)
3. environment variables (``SKILLWISP_DISTRIBUTION_URL``, ``SKILLWISP_NO_SYMLINKS``)

Example config.toml:

    [distribution]
    url = "https://github.com/skillwisp/registry"

    [install]
    use_symlinks = true
    scope = "local"
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import tomli

from skillwisp.constants import (
    CONFIG_FILENAME,
    DEFAULT_DISTRIBUTION_URL,
    PRIMARY_DIR_NAME,
    USER_DATA_DIR_NAME,
)
from skillwisp.exceptions import ConfigNotFoundError, ConfigParseError, ConfigValidationError

ENV_DISTRIBUTION_URL = "SKILLWISP_DISTRIBUTION_URL"
ENV_NO_SYMLINKS = "SKILLWISP_NO_SYMLINKS"

_TRUTHY = ("1", "true", "yes", "on")


def user_data_dir(home: Path | None = None) -> Path:
    """Per-user data root (~/.agents/.skillwisp)."""
    return (home if home is not None else Path.home()) / PRIMARY_DIR_NAME / USER_DATA_DIR_NAME


def default_config_path(home: Path | None = None) -> Path:
    return user_data_dir(home) / CONFIG_FILENAME


@dataclass
class SkillwispConfig:
    """Resolved runtime configuration."""

    distribution_url: str = DEFAULT_DISTRIBUTION_URL
    use_symlinks: bool = True
    default_scope: str = "local"
    path: Path | None = field(default=None, compare=False)

    @classmethod
    def load(cls, path: Path) -> "SkillwispConfig":
        """Load configuration from a config.toml file.

        Args:
            path: Path to the config file

        Returns:
            Parsed SkillwispConfig

        Raises:
            ConfigNotFoundError: If the file doesn't exist
            ConfigParseError: If the file cannot be parsed
            ConfigValidationError: If the configuration is invalid
        """
        if not path.exists():
            raise ConfigNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "rb") as f:
                data = tomli.load(f)
        except tomli.TOMLDecodeError as e:
            raise ConfigParseError(f"Failed to parse {path}: {e}")

        config = cls(path=path)
        config._apply_dict(data)
        return config

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        path: Path | None = None,
    ) -> "SkillwispConfig":
        """Build the effective configuration.

        Args:
            environ: Environment mapping (defaults to os.environ)
            path: Config file to read; the default location is used when None
                and silently skipped if absent

        Returns:
            SkillwispConfig with file and environment overrides applied
        """
        env = os.environ if environ is None else environ
        config_path = path if path is not None else default_config_path()

        if config_path.exists() or path is not None:
            config = cls.load(config_path)
        else:
            config = cls()

        url = env.get(ENV_DISTRIBUTION_URL, "").strip()
        if url:
            config.distribution_url = url
        if env.get(ENV_NO_SYMLINKS, "").strip().lower() in _TRUTHY:
            config.use_symlinks = False
        return config

    def _apply_dict(self, data: dict[str, Any]) -> None:
        distribution = data.get("distribution", {})
        if not isinstance(distribution, dict):
            raise ConfigValidationError("[distribution] must be a table")
        if "url" in distribution:
            url = distribution["url"]
            if not isinstance(url, str) or not url.strip():
                raise ConfigValidationError("distribution.url must be a non-empty string")
            self.distribution_url = url.strip()

        install = data.get("install", {})
        if not isinstance(install, dict):
            raise ConfigValidationError("[install] must be a table")
        if "use_symlinks" in install:
            if not isinstance(install["use_symlinks"], bool):
                raise ConfigValidationError("install.use_symlinks must be true or false")
            self.use_symlinks = install["use_symlinks"]
        if "scope" in install:
            if install["scope"] not in ("local", "global"):
                raise ConfigValidationError(
                    f"install.scope has invalid value '{install['scope']}'. "
                    "Must be 'local' or 'global'"
                )
            self.default_scope = install["scope"]
