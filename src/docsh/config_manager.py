"""Configuration management module.

This module handles persistent configuration storage using TOML format.
Stores rendering preferences and where to look for shell functions.

Example ~/.docsh/config.toml:

    indent = 2
    pager = true
    color = "auto"
    library_files = ["~/.bash_lib/*.sh"]
"""

import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import tomli
import tomlkit

from docsh.exceptions import DocshError
from docsh.renderer import DEFAULT_HEADING_WORDS

logger = logging.getLogger(__name__)

COLOR_MODES = ("auto", "always", "never")


class ConfigError(DocshError):
    """Raised when configuration operations fail."""

    exit_code = 5


@dataclass
class DocshConfig:
    """docsh configuration data."""

    indent: int = 2
    pager: bool = True
    color: str = "auto"  # auto | always | never
    heading_words: list[str] = field(default_factory=lambda: list(DEFAULT_HEADING_WORDS))
    library_files: list[str] = field(default_factory=list)  # globs allowed
    renderer_name: str = "docsh"
    shell: str = "bash"
    shell_timeout: int = 10

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DocshConfig":
        """Create from dictionary, validating known keys.

        Raises:
            ConfigError: If a value has the wrong type or is out of range
        """
        defaults = cls()
        unknown = set(data) - set(defaults.to_dict())
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(sorted(unknown))}")

        config = cls(
            indent=data.get("indent", defaults.indent),
            pager=data.get("pager", defaults.pager),
            color=data.get("color", defaults.color),
            heading_words=list(data.get("heading_words", defaults.heading_words)),
            library_files=list(data.get("library_files", defaults.library_files)),
            renderer_name=data.get("renderer_name", defaults.renderer_name),
            shell=data.get("shell", defaults.shell),
            shell_timeout=data.get("shell_timeout", defaults.shell_timeout),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Check value types and ranges.

        Raises:
            ConfigError: If a value is invalid
        """
        if not isinstance(self.indent, int) or isinstance(self.indent, bool) or self.indent < 0:
            raise ConfigError(f"indent must be a non-negative integer, got {self.indent!r}")
        if not isinstance(self.pager, bool):
            raise ConfigError(f"pager must be true or false, got {self.pager!r}")
        if self.color not in COLOR_MODES:
            raise ConfigError(f"color must be one of {', '.join(COLOR_MODES)}, got {self.color!r}")
        if not all(isinstance(word, str) and word for word in self.heading_words):
            raise ConfigError("heading_words must be a list of non-empty strings")
        if not all(isinstance(path, str) for path in self.library_files):
            raise ConfigError("library_files must be a list of strings")
        if not self.renderer_name or not isinstance(self.renderer_name, str):
            raise ConfigError("renderer_name must be a non-empty string")
        if not isinstance(self.shell_timeout, int) or self.shell_timeout <= 0:
            raise ConfigError(
                f"shell_timeout must be a positive integer, got {self.shell_timeout!r}"
            )


class ConfigManager:
    """Manage docsh configuration file.

    Configuration is stored at ~/.docsh/config.toml.
    """

    DEFAULT_CONFIG_DIR = Path.home() / ".docsh"
    DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

    @classmethod
    def get_config_path(cls, custom_path: str | None = None) -> Path:
        """Get configuration file path.

        Args:
            custom_path: Custom config file path (optional)

        Returns:
            Path to config file

        Raises:
            ConfigError: If a custom path is given but does not exist
        """
        if custom_path:
            path = Path(custom_path).expanduser().resolve()
            if not path.exists():
                raise ConfigError(f"Config file not found: {path}")
            return path

        env_path = os.environ.get("DOCSH_CONFIG")
        if env_path:
            return Path(env_path).expanduser()

        return cls.DEFAULT_CONFIG_FILE

    @classmethod
    def load_config(cls, custom_path: str | None = None) -> DocshConfig:
        """Load configuration from file.

        Args:
            custom_path: Custom config file path (optional)

        Returns:
            DocshConfig object (defaults when no config file exists)

        Raises:
            ConfigError: If loading fails
        """
        config_path = cls.get_config_path(custom_path)

        if not config_path.exists():
            logger.debug("Config file not found, using defaults")
            return DocshConfig()

        try:
            with open(config_path, "rb") as f:
                data = tomli.load(f)
        except (OSError, tomli.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to load config: {e}") from e

        logger.debug(f"Loaded config from: {config_path}")
        return DocshConfig.from_dict(data)

    @classmethod
    def save_config(cls, config: DocshConfig, custom_path: str | None = None) -> Path:
        """Save configuration to file.

        Existing comments and formatting in the file are preserved.

        Args:
            config: Configuration to save
            custom_path: Custom config file path (optional)

        Returns:
            Path the configuration was written to

        Raises:
            ConfigError: If saving fails
        """
        if custom_path:
            config_path = Path(custom_path).expanduser().resolve()
        else:
            config_path = cls.get_config_path()

        temp_path = config_path.with_suffix(".tmp")
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)

            if config_path.exists():
                with open(config_path) as f:
                    doc = tomlkit.load(f)
            else:
                doc = tomlkit.document()
                doc.add(tomlkit.comment("docsh configuration"))

            for key, value in config.to_dict().items():
                doc[key] = value

            # Write to temp file, then atomic rename
            with open(temp_path, "w") as f:
                tomlkit.dump(doc, f)
            temp_path.replace(config_path)

        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            raise ConfigError(f"Failed to save config: {e}") from e

        logger.debug(f"Saved config to: {config_path}")
        return config_path


__all__ = ["COLOR_MODES", "ConfigError", "ConfigManager", "DocshConfig"]
