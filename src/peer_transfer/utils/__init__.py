"""Utility modules for peer_transfer."""

from .config_persistence import save_config_to_file
from .validation_helpers import default_save_path, is_file_writable

__all__ = ['save_config_to_file', 'default_save_path', 'is_file_writable']
