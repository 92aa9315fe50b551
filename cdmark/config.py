"""
Settings for cdmark.

Settings say where the bookmark file lives, how paths are listed and how
strictly the file is read. They come from TOML files (per user in
~/.config/cdmark/config.toml, per directory in cdmark.toml or .cdmarkrc),
then CDMARK_* environment variables, then command-line options.
"""
import os
import tomli
import tomli_w
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, field, fields, asdict

from cdmark.constants import (
    DEFAULT_BOOKMARK_FILE,
    ENV_PREFIX,
    LOCAL_CONFIG_NAMES,
    PATH_FORMATS,
    USER_CONFIG_DIR,
    USER_CONFIG_NAME,
)


def user_config_path() -> Path:
    """Location of the per-user config file."""
    return Path(os.path.expanduser(USER_CONFIG_DIR)) / USER_CONFIG_NAME


@dataclass
class CdmarkConfig:
    """
    Resolved cdmark settings.

    Configuration hierarchy (highest to lowest priority):
    1. Command-line arguments
    2. Environment variables (CDMARK_*)
    3. Specific config file (--config)
    4. Local config file (./cdmark.toml or ./.cdmarkrc)
    5. User config file (~/.config/cdmark/config.toml)
    6. System defaults
    """

    # Storage
    bookmark_file: str = field(default=DEFAULT_BOOKMARK_FILE)
    strict_load: bool = field(default=False)  # Fail on corrupt lines instead of skipping them

    # Display settings
    path_format: str = field(default="absolute")  # absolute, relative
    color_output: bool = field(default=True)

    # Advanced
    log_level: str = field(default="WARNING")

    @classmethod
    def load(cls, config_file: Optional[Path] = None) -> "CdmarkConfig":
        """
        Load configuration from files and environment.

        Args:
            config_file: Specific config file to load (applied after the others)

        Returns:
            Merged configuration object
        """
        config = cls()

        user_path = user_config_path()
        if user_path.exists():
            config._merge(cls._load_toml(user_path))

        # First local config found wins
        for name in LOCAL_CONFIG_NAMES:
            path = Path.cwd() / name
            if path.exists():
                config._merge(cls._load_toml(path))
                break

        if config_file and config_file.exists():
            config._merge(cls._load_toml(config_file))

        config._apply_env_vars()
        config._expand_paths()
        config._validate()

        return config

    @staticmethod
    def _load_toml(path: Path) -> Dict[str, Any]:
        """Read one settings file as a flat table."""
        with open(path, "rb") as f:
            return tomli.load(f)

    def _merge(self, data: Dict[str, Any]):
        """Take the known keys of a settings table; unknown keys are ignored."""
        known = {setting.name for setting in fields(self)}
        for key, value in data.items():
            if key in known:
                setattr(self, key, value)

    def _apply_env_vars(self):
        """Override settings from CDMARK_BOOKMARK_FILE, CDMARK_STRICT_LOAD and friends."""
        for setting in fields(self):
            value = os.environ.get(ENV_PREFIX + setting.name.upper())
            if value is None:
                continue
            if isinstance(getattr(self, setting.name), bool):
                value = value.lower() in ("true", "1", "yes")
            setattr(self, setting.name, value)

    def _expand_paths(self):
        """Expand ~ and $VARS in the bookmark file setting."""
        if isinstance(self.bookmark_file, str):
            self.bookmark_file = os.path.expanduser(os.path.expandvars(self.bookmark_file))

    def _validate(self):
        if self.path_format not in PATH_FORMATS:
            raise ValueError(
                f"Invalid path_format '{self.path_format}' (expected one of: {', '.join(PATH_FORMATS)})"
            )

    def save(self, path: Optional[Path] = None) -> Path:
        """
        Save current configuration to TOML file.

        Args:
            path: Path to save to (defaults to user config)

        Returns:
            The path written
        """
        if path is None:
            path = user_config_path()

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "wb") as f:
            tomli_w.dump(asdict(self), f)
        return path

    def get_bookmark_path(self) -> Path:
        """Get the resolved bookmark file path."""
        path = Path(self.bookmark_file)
        if not path.is_absolute():
            path = Path.cwd() / path
        return path

    @property
    def relative_paths(self) -> bool:
        return self.path_format == "relative"


# Global configuration instance
_config: Optional[CdmarkConfig] = None


def get_config(reload: bool = False, config_file: Optional[Path] = None) -> CdmarkConfig:
    """
    Return the settings for this process, loading them on first use.

    Args:
        reload: Force reload configuration from files
        config_file: Specific config file to load

    Returns:
        The shared CdmarkConfig
    """
    global _config
    if _config is None or reload or config_file:
        _config = CdmarkConfig.load(config_file)
    return _config


def init_config(bookmark_file: Optional[str] = None, config_file: Optional[Path] = None,
                **kwargs) -> CdmarkConfig:
    """
    Load settings and apply the command-line overrides on top.

    Args:
        bookmark_file: Bookmark file override
        config_file: Specific config file to load
        **kwargs: Other configuration overrides

    Returns:
        Configured instance
    """
    config = get_config(config_file=config_file)

    if bookmark_file:
        config.bookmark_file = os.path.expanduser(bookmark_file)

    for key, value in kwargs.items():
        if hasattr(config, key) and value is not None:
            setattr(config, key, value)

    return config
