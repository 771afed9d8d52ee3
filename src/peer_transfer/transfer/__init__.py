"""Transfer state, notifications routing and previews."""

from .models import (
    ControlAction,
    IdSequence,
    TransferDirection,
    TransferFile,
    TransferIdentity,
    TransferState,
)
from .widget import TransferWidget
from .registry import TransferManager

__all__ = [
    "ControlAction",
    "IdSequence",
    "TransferDirection",
    "TransferFile",
    "TransferIdentity",
    "TransferState",
    "TransferWidget",
    "TransferManager",
]
