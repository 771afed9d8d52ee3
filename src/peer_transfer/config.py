"""Configuration management for peer_transfer."""

import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_PREVIEW_MAX_FILE_SIZE = 25 * 1024 * 1024
DEFAULT_CORE_BUS_NAME = "org.peerchat.TransferCore"


def config_file_path() -> Path:
    """Return the location of the JSON configuration file."""
    return Path.home() / ".config" / "peer_transfer" / "config.json"


def parse_bool_env(env_var: str, default: bool) -> bool:
    """Parse boolean environment variable with validation."""
    value = os.getenv(env_var)
    if value is None:
        return default

    value_lower = value.lower().strip()
    if value_lower in ('true', '1', 'yes', 'on'):
        return True
    elif value_lower in ('false', '0', 'no', 'off', ''):
        return False
    else:
        logger.warning(
            f"Invalid boolean value '{value}' for {env_var}. "
            f"Valid: true/false, 1/0, yes/no, on/off. Using default: {default}"
        )
        return default


def parse_int_env(env_var: str, default: int) -> int:
    """Parse integer environment variable with validation."""
    value = os.getenv(env_var)
    if value is None:
        return default

    try:
        return int(value)
    except ValueError:
        logger.warning(
            f"Invalid integer value '{value}' for {env_var}. "
            f"Using default: {default}"
        )
        return default


@dataclass
class PreviewConfig:
    """Thumbnail decoding for image transfers."""
    enabled: bool = True
    max_file_size: int = DEFAULT_PREVIEW_MAX_FILE_SIZE  # Bytes; bigger files get no preview
    thumbnail_height: int = 50                          # Pixels


@dataclass
class DownloadConfig:
    """Where incoming files are offered to be saved."""
    default_directory: Optional[str] = None  # None = current working directory

    def resolve_directory(self) -> Path:
        """Directory used to build the default save path."""
        if self.default_directory:
            return Path(self.default_directory).expanduser()
        return Path.cwd()


@dataclass
class CoreConfig:
    """Connection to the external transfer core."""
    bus_name: str = DEFAULT_CORE_BUS_NAME


@dataclass
class PeerTransferConfig:
    """Main configuration for peer_transfer."""
    preview: PreviewConfig
    downloads: DownloadConfig
    core: CoreConfig

    @classmethod
    def defaults(cls) -> 'PeerTransferConfig':
        """Configuration with every value at its default, ignoring file and env."""
        return cls(
            preview=PreviewConfig(),
            downloads=DownloadConfig(),
            core=CoreConfig(),
        )

    @classmethod
    def load(cls) -> 'PeerTransferConfig':
        """Load configuration from file and environment variables."""
        config_dict = {
            "preview": {
                "enabled": True,
                "max_file_size": DEFAULT_PREVIEW_MAX_FILE_SIZE,
                "thumbnail_height": 50,
            },
            "downloads": {
                "default_directory": None,
            },
            "core": {
                "bus_name": DEFAULT_CORE_BUS_NAME,
            },
        }

        config_path = config_file_path()
        if config_path.exists():
            try:
                with open(config_path, "r") as f:
                    file_config = json.load(f)
                logger.info(f"Loading configuration from {config_path}")

                for section, values in file_config.items():
                    if section in config_dict and isinstance(values, dict):
                        config_dict[section].update(values)

            except json.JSONDecodeError as e:
                error_msg = (
                    f"Configuration file is corrupted or contains invalid JSON:\n"
                    f"  File: {config_path}\n"
                    f"  Error: {e}\n"
                    f"  Using default configuration instead."
                )
                logger.error(error_msg)
                print(f"WARNING: {error_msg}", file=sys.stderr)

            except OSError as e:
                logger.warning(f"Failed to load config from file: {e}")

        # Override with environment variables
        config_dict["preview"]["enabled"] = parse_bool_env('PEER_TRANSFER_PREVIEW_ENABLED', config_dict["preview"]["enabled"])
        config_dict["preview"]["max_file_size"] = parse_int_env('PEER_TRANSFER_PREVIEW_MAX_FILE_SIZE', config_dict["preview"]["max_file_size"])
        config_dict["preview"]["thumbnail_height"] = parse_int_env('PEER_TRANSFER_THUMBNAIL_HEIGHT', config_dict["preview"]["thumbnail_height"])

        config_dict["downloads"]["default_directory"] = os.getenv('PEER_TRANSFER_DOWNLOAD_DIR', config_dict["downloads"]["default_directory"])

        config_dict["core"]["bus_name"] = os.getenv('PEER_TRANSFER_CORE_BUS_NAME', config_dict["core"]["bus_name"])

        try:
            config = cls(
                preview=PreviewConfig(**config_dict["preview"]),
                downloads=DownloadConfig(**config_dict["downloads"]),
                core=CoreConfig(**config_dict["core"]),
            )
        except TypeError as e:
            raise ConfigurationError(f"Unknown configuration key: {e}") from e
        config.validate()
        return config

    def validate(self) -> None:
        """Validate configuration values."""
        if self.preview.max_file_size < 0:
            raise ConfigurationError(
                f"Invalid preview size limit {self.preview.max_file_size}. "
                "Must be >= 0"
            )

        if not (1 <= self.preview.thumbnail_height <= 512):
            raise ConfigurationError(
                f"Invalid thumbnail height {self.preview.thumbnail_height}. "
                "Must be between 1 and 512 pixels"
            )

        if not self.core.bus_name or "." not in self.core.bus_name:
            raise ConfigurationError(
                f"Invalid core bus name '{self.core.bus_name}'. "
                "Must be a dotted D-Bus name like 'org.peerchat.TransferCore'"
            )

        if self.downloads.default_directory:
            directory = Path(self.downloads.default_directory).expanduser()
            if directory.exists() and not directory.is_dir():
                raise ConfigurationError(
                    f"Download directory '{directory}' exists but is not a directory"
                )

    def to_dict(self) -> dict:
        """Convert configuration to a JSON-serializable dict."""
        return {
            "preview": {
                "enabled": self.preview.enabled,
                "max_file_size": self.preview.max_file_size,
                "thumbnail_height": self.preview.thumbnail_height,
            },
            "downloads": {
                "default_directory": self.downloads.default_directory,
            },
            "core": {
                "bus_name": self.core.bus_name,
            },
        }
