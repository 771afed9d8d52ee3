"""Shared pytest fixtures for peer_transfer tests."""

from unittest.mock import MagicMock

import pytest
from PIL import Image

from peer_transfer.config import PeerTransferConfig
from peer_transfer.transfer.models import IdSequence, TransferDirection, TransferFile
from peer_transfer.transfer.widget import TransferWidget


class FakeClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def isolated_home(monkeypatch, tmp_path):
    """Isolate tests from the real ~/.config."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def core():
    """Stand-in for TransferCoreClient."""
    mock = MagicMock()
    for method in (
        "cancel_file_send",
        "reject_file_recv_request",
        "accept_file_recv_request",
        "pause_resume_file_recv",
        "pause_resume_file_send",
    ):
        getattr(mock, method).return_value = True
    return mock


@pytest.fixture
def config(tmp_path):
    config = PeerTransferConfig.defaults()
    config.downloads.default_directory = str(tmp_path)
    return config


@pytest.fixture
def sequence():
    return IdSequence()


@pytest.fixture
def incoming_file():
    return TransferFile(
        peer_id=3,
        transfer_id=7,
        direction=TransferDirection.RECEIVING,
        filename="holiday.png",
        file_size=10000,
    )


@pytest.fixture
def outgoing_file():
    return TransferFile(
        peer_id=3,
        transfer_id=8,
        direction=TransferDirection.SENDING,
        filename="report.pdf",
        file_size=1048576,
    )


@pytest.fixture
def make_widget(core, sequence, config, clock):
    """Factory building widgets that share the test's core, clock and ids."""

    def _make(file, **kwargs):
        kwargs.setdefault("config", config)
        kwargs.setdefault("clock", clock)
        return TransferWidget(file, core, sequence, **kwargs)

    return _make


@pytest.fixture
def sample_png(tmp_path):
    """A 100x200 PNG on disk."""
    path = tmp_path / "sample.png"
    Image.new("RGB", (100, 200), (200, 30, 30)).save(path)
    return path
