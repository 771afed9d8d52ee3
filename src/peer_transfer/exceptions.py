"""Custom exceptions for peer_transfer."""


class PeerTransferError(Exception):
    """Base exception for all peer_transfer errors."""
    pass


class ConfigurationError(PeerTransferError):
    """Raised when configuration is invalid."""
    pass


class TransferStateError(PeerTransferError):
    """Raised when a transfer widget is driven in a way its state forbids."""
    pass


class ReentrantUpdateError(TransferStateError):
    """Raised when a change listener tries to mutate the widget it observes."""
    pass


class CoreUnavailableError(PeerTransferError):
    """Raised when the transfer core cannot be reached on the bus."""
    pass
