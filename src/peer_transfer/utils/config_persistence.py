"""Configuration persistence utilities."""

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import PeerTransferConfig

logger = logging.getLogger(__name__)


def save_config_to_file(config: "PeerTransferConfig") -> Path:
    """Save configuration to JSON file."""
    from ..config import config_file_path

    config_path = config_file_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        json.dump(config.to_dict(), f, indent=2)

    logger.info(f"Configuration saved to {config_path}")
    return config_path
