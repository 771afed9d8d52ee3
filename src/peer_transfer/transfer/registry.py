"""Creates transfer widgets and routes core notifications to them."""

import logging
import time
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Union

from ..config import PeerTransferConfig
from .models import IdSequence, TransferDirection, TransferFile, TransferIdentity
from .widget import SavePathPrompt, TransferWidget, WarningSink

if TYPE_CHECKING:
    from ..service.core_client import TransferCoreClient

logger = logging.getLogger(__name__)

DirectionLike = Union[TransferDirection, int]


def coerce_direction(value: DirectionLike) -> TransferDirection:
    """Accept the enum or the integer the core sends on the bus."""
    if isinstance(value, TransferDirection):
        return value
    return TransferDirection(int(value))


class TransferManager:
    """
    Owns the widgets of one chat session.

    Active transfers are registered under their identity, so a notification
    from the core reaches exactly one widget. Widgets unregister themselves
    when they reach a terminal state; they stay available by id so the chat
    log can keep rendering them.
    """

    def __init__(
        self,
        core: "TransferCoreClient",
        config: Optional[PeerTransferConfig] = None,
        prompt_save_path: Optional[SavePathPrompt] = None,
        warn: Optional[WarningSink] = None,
        id_sequence: Optional[IdSequence] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.core = core
        self.config = config or PeerTransferConfig.defaults()
        self.prompt_save_path = prompt_save_path
        self.warn = warn
        self.id_sequence = id_sequence or IdSequence()
        self._clock = clock
        self._active: Dict[TransferIdentity, TransferWidget] = {}
        self._by_id: Dict[int, TransferWidget] = {}

    def add_transfer(self, file: TransferFile) -> TransferWidget:
        """Create and register a widget for a transfer announced by the core."""
        identity = file.identity
        previous = self._active.get(identity)
        if previous is not None:
            logger.warning(
                f"Transfer {identity} already tracked by widget {previous.id}, replacing it"
            )

        widget = TransferWidget(
            file,
            self.core,
            self.id_sequence,
            config=self.config,
            prompt_save_path=self.prompt_save_path,
            warn=self.warn,
            clock=self._clock,
        )
        widget.attach(lambda: self._unregister(identity, widget))
        self._active[identity] = widget
        self._by_id[widget.id] = widget
        logger.info(f"Tracking {identity.direction.name.lower()} transfer {file.filename!r} as widget {widget.id}")
        return widget

    def _unregister(self, identity: TransferIdentity, widget: TransferWidget) -> None:
        if self._active.get(identity) is widget:
            del self._active[identity]

    def forget(self, widget_id: int) -> Optional[TransferWidget]:
        """Drop a widget the chat log no longer shows.

        Widgets stay available by id after they finish so the log can keep
        rendering them; the host calls this when the entry is removed. An
        active widget also stops receiving core notifications.
        """
        widget = self._by_id.pop(widget_id, None)
        if widget is not None:
            self._unregister(widget.identity, widget)
            logger.debug(f"Forgot transfer widget {widget_id}")
        return widget

    def get(self, identity: TransferIdentity) -> Optional[TransferWidget]:
        """Active widget for an identity, if any."""
        return self._active.get(identity)

    def get_by_id(self, widget_id: int) -> Optional[TransferWidget]:
        """Any widget created by this manager, active or not."""
        return self._by_id.get(widget_id)

    @property
    def active_transfers(self) -> List[TransferWidget]:
        return list(self._active.values())

    @property
    def widgets(self) -> List[TransferWidget]:
        return list(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)

    def _lookup(self, peer_id: int, transfer_id: int, direction: DirectionLike) -> Optional[TransferWidget]:
        identity = TransferIdentity(int(peer_id), int(transfer_id), coerce_direction(direction))
        widget = self._active.get(identity)
        if widget is None:
            logger.debug(f"Ignoring notification for untracked transfer {identity}")
        return widget

    # ─── Core signal handlers ────────────────────────────────────────────

    def on_file_transfer_info(self, peer_id, transfer_id, total_size, bytes_transferred, direction) -> None:
        widget = self._lookup(peer_id, transfer_id, direction)
        if widget is not None:
            widget.report_progress(
                widget.peer_id, widget.transfer_id, int(total_size), int(bytes_transferred), widget.direction
            )

    def on_file_transfer_cancelled(self, peer_id, transfer_id, direction) -> None:
        widget = self._lookup(peer_id, transfer_id, direction)
        if widget is not None:
            widget.report_cancelled(widget.peer_id, widget.transfer_id, widget.direction)

    def on_file_transfer_finished(self, peer_id, transfer_id, direction, file_path=None) -> None:
        widget = self._lookup(peer_id, transfer_id, direction)
        if widget is not None:
            widget.report_finished(widget.peer_id, widget.transfer_id, widget.direction, file_path)

    def on_file_transfer_accepted(self, peer_id, transfer_id, direction) -> None:
        widget = self._lookup(peer_id, transfer_id, direction)
        if widget is not None:
            widget.report_accepted(widget.peer_id, widget.transfer_id, widget.direction)

    def on_file_transfer_remote_paused(self, peer_id, transfer_id, direction, paused) -> None:
        widget = self._lookup(peer_id, transfer_id, direction)
        if widget is not None:
            widget.report_remote_pause(widget.peer_id, widget.transfer_id, widget.direction, bool(paused))

    def on_file_transfer_paused(self, peer_id, transfer_id, direction) -> None:
        widget = self._lookup(peer_id, transfer_id, direction)
        if widget is not None:
            widget.report_paused(widget.peer_id, widget.transfer_id, widget.direction)

    def bind(self, client: "TransferCoreClient") -> None:
        """Subscribe the handlers above to the core's D-Bus signals."""
        client.on_file_transfer_info(self.on_file_transfer_info)
        client.on_file_transfer_cancelled(self.on_file_transfer_cancelled)
        client.on_file_transfer_finished(self.on_file_transfer_finished)
        client.on_file_transfer_accepted(self.on_file_transfer_accepted)
        client.on_file_transfer_remote_paused(self.on_file_transfer_remote_paused)
        client.on_file_transfer_paused(self.on_file_transfer_paused)
