"""Tests for configuration persistence utilities."""

import json

from peer_transfer.config import PeerTransferConfig, config_file_path
from peer_transfer.utils.config_persistence import save_config_to_file


class TestSaveConfigToFile:
    """Test save_config_to_file function."""

    def test_creates_directory(self):
        """Save creates the config directory if it doesn't exist."""
        assert not config_file_path().parent.exists()

        result_path = save_config_to_file(PeerTransferConfig.load())

        assert result_path == config_file_path()
        assert result_path.exists()

    def test_valid_json(self):
        """Saved file contains every section."""
        result_path = save_config_to_file(PeerTransferConfig.load())

        with open(result_path, 'r') as f:
            data = json.load(f)

        assert set(data) == {"preview", "downloads", "core"}
        assert data["preview"]["thumbnail_height"] == 50
        assert data["downloads"]["default_directory"] is None

    def test_round_trip(self, tmp_path):
        """A saved config loads back with the same values."""
        config = PeerTransferConfig.load()
        config.preview.thumbnail_height = 72
        config.downloads.default_directory = str(tmp_path)
        save_config_to_file(config)

        reloaded = PeerTransferConfig.load()
        assert reloaded.preview.thumbnail_height == 72
        assert reloaded.downloads.default_directory == str(tmp_path)
