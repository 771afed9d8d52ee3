"""Data models shared by the transfer widget, its manager and the UI."""

import itertools
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TransferDirection(Enum):
    """Which side of the transfer this client is on.

    Values match the integers the core sends over D-Bus.
    """
    SENDING = 0
    RECEIVING = 1


class TransferState(Enum):
    """Transfer state machine."""
    PENDING = "pending"          # Waiting for the receiver to accept
    PROCESSING = "processing"    # Bytes are flowing
    PAUSED = "paused"            # Paused locally
    CANCELED = "canceled"        # Terminal
    FINISHED = "finished"        # Terminal

    @property
    def is_terminal(self) -> bool:
        return self in (TransferState.CANCELED, TransferState.FINISHED)

    @property
    def is_active(self) -> bool:
        """True while the transfer can still be paused or resumed."""
        return self in (TransferState.PROCESSING, TransferState.PAUSED)


class ControlAction(Enum):
    """The two controls rendered next to a transfer."""
    PRIMARY = "btnA"      # Left: cancel / reject
    SECONDARY = "btnB"    # Right: pause, resume or accept


@dataclass(frozen=True)
class TransferIdentity:
    """The triple the core uses to name a transfer in every notification."""
    peer_id: int
    transfer_id: int
    direction: TransferDirection

    def matches(self, peer_id: int, transfer_id: int, direction: TransferDirection) -> bool:
        return (
            self.peer_id == peer_id
            and self.transfer_id == transfer_id
            and self.direction == direction
        )


@dataclass
class TransferFile:
    """A transfer as announced by the core."""
    peer_id: int
    transfer_id: int
    direction: TransferDirection
    filename: str
    file_size: int
    file_path: Optional[str] = None  # Local source for outgoing files

    @property
    def identity(self) -> TransferIdentity:
        return TransferIdentity(self.peer_id, self.transfer_id, self.direction)


class IdSequence:
    """Hands out sequential widget ids.

    Owned by whoever creates widgets, so ids are unique per sequence rather
    than per process.
    """

    def __init__(self, start: int = 0):
        self._counter = itertools.count(start)

    def next_id(self) -> int:
        return next(self._counter)
