"""peer_transfer - file transfer widgets for a peer-to-peer chat client."""

__version__ = "0.1.0"

from .config import (
    PeerTransferConfig,
    PreviewConfig,
    DownloadConfig,
    CoreConfig,
)
from .exceptions import (
    PeerTransferError,
    ConfigurationError,
    TransferStateError,
    ReentrantUpdateError,
    CoreUnavailableError,
)
from .transfer import (
    ControlAction,
    IdSequence,
    TransferDirection,
    TransferFile,
    TransferIdentity,
    TransferState,
    TransferWidget,
    TransferManager,
)

__all__ = [
    # Configuration
    "PeerTransferConfig",
    "PreviewConfig",
    "DownloadConfig",
    "CoreConfig",
    # Exceptions
    "PeerTransferError",
    "ConfigurationError",
    "TransferStateError",
    "ReentrantUpdateError",
    "CoreUnavailableError",
    # Transfers
    "ControlAction",
    "IdSequence",
    "TransferDirection",
    "TransferFile",
    "TransferIdentity",
    "TransferState",
    "TransferWidget",
    "TransferManager",
]
