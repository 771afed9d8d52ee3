"""D-Bus client for the external file transfer core."""

import logging
from typing import Callable, Optional

from pydbus import SessionBus

from ..config import DEFAULT_CORE_BUS_NAME
from ..exceptions import CoreUnavailableError

logger = logging.getLogger(__name__)


class TransferCoreClient:
    """D-Bus client for the transfer core.

    Wraps the core's methods so failures are logged and reported as False
    instead of raised, and records signal subscriptions so they are
    re-established when the core restarts.
    """

    def __init__(self, bus_name: str = DEFAULT_CORE_BUS_NAME):
        """Connect to the core via D-Bus. Sets is_connected=False if unavailable."""
        self.bus_name = bus_name
        self._proxy = None
        self._bus = None
        self._connected = False
        self._subscriptions = []
        self._name_watch_id = None
        self._on_connected_callback: Optional[Callable] = None
        self._on_disconnected_callback: Optional[Callable] = None
        self._pending_signal_setups: list[Callable] = []

        self._try_connect()

    def _try_connect(self) -> bool:
        """Internal: attempt to connect to the core."""
        try:
            if self._bus is None:
                self._bus = SessionBus()
            self._proxy = self._bus.get(self.bus_name)
            self._connected = True
            logger.info(f"Connected to transfer core {self.bus_name}")
            return True
        except Exception as e:
            logger.warning(f"Could not connect to transfer core {self.bus_name}: {e}")
            self._proxy = None
            self._connected = False
            return False

    @property
    def is_connected(self) -> bool:
        """Whether the client is connected to the core."""
        return self._connected

    def connect(self) -> bool:
        """Attempt to connect/reconnect with a fresh bus. Returns success."""
        self._bus = None
        return self._try_connect()

    def watch_name(self, on_connected: Optional[Callable] = None,
                   on_disconnected: Optional[Callable] = None) -> None:
        """Watch for the core appearing/disappearing on the bus.

        Callbacks fire on the GLib main loop thread.
        """
        self._on_connected_callback = on_connected
        self._on_disconnected_callback = on_disconnected

        try:
            if self._bus is None:
                self._bus = SessionBus()
            from gi.repository import Gio
            connection = self._bus.con

            self._name_watch_id = Gio.bus_watch_name_on_connection(
                connection,
                self.bus_name,
                Gio.BusNameWatcherFlags.NONE,
                self._on_name_appeared,
                self._on_name_vanished,
            )
            logger.info(f"Watching for {self.bus_name} on session bus")
        except Exception as e:
            logger.warning(f"Failed to set up name watch: {e}")

    def _on_name_appeared(self, connection, name, name_owner):
        """Called when the core appears on the bus."""
        logger.info(f"Transfer core appeared: {name} (owner: {name_owner})")
        if not self._connected:
            self._try_connect()
            for setup_fn in self._pending_signal_setups:
                setup_fn()
        if self._on_connected_callback:
            self._on_connected_callback()

    def _on_name_vanished(self, connection, name):
        """Called when the core vanishes from the bus."""
        logger.info(f"Transfer core vanished: {name}")
        self._connected = False
        self._proxy = None
        if self._on_disconnected_callback:
            self._on_disconnected_callback()

    # ─── Method wrappers ─────────────────────────────────────────────────

    def _call(self, method: str, *args) -> bool:
        if not self._connected or not self._proxy:
            logger.warning(f"{method} skipped: transfer core not connected")
            return False
        try:
            result = getattr(self._proxy, method)(*args)
            return True if result is None else bool(result)
        except Exception as e:
            logger.warning(f"{method}{args} failed: {e}")
            return False

    def cancel_file_send(self, peer_id: int, transfer_id: int) -> bool:
        """Cancel a transfer."""
        return self._call("CancelFileSend", peer_id, transfer_id)

    def reject_file_recv_request(self, peer_id: int, transfer_id: int) -> bool:
        """Refuse an incoming transfer."""
        return self._call("RejectFileRecvRequest", peer_id, transfer_id)

    def accept_file_recv_request(self, peer_id: int, transfer_id: int, path: str) -> bool:
        """Accept an incoming transfer and write it to ``path``."""
        return self._call("AcceptFileRecvRequest", peer_id, transfer_id, path)

    def pause_resume_file_recv(self, peer_id: int, transfer_id: int) -> bool:
        """Toggle pause on an incoming transfer."""
        return self._call("PauseResumeFileRecv", peer_id, transfer_id)

    def pause_resume_file_send(self, peer_id: int, transfer_id: int) -> bool:
        """Toggle pause on an outgoing transfer."""
        return self._call("PauseResumeFileSend", peer_id, transfer_id)

    # ─── Signal subscriptions ────────────────────────────────────────────

    def on_file_transfer_info(self, callback: Callable) -> None:
        """Subscribe to FileTransferInfo (peer, transfer, total, sent, direction)."""
        self._subscribe_signal("FileTransferInfo", callback)

    def on_file_transfer_cancelled(self, callback: Callable) -> None:
        """Subscribe to FileTransferCancelled (peer, transfer, direction)."""
        self._subscribe_signal("FileTransferCancelled", callback)

    def on_file_transfer_finished(self, callback: Callable) -> None:
        """Subscribe to FileTransferFinished (peer, transfer, direction, path)."""
        self._subscribe_signal("FileTransferFinished", callback)

    def on_file_transfer_accepted(self, callback: Callable) -> None:
        """Subscribe to FileTransferAccepted (peer, transfer, direction)."""
        self._subscribe_signal("FileTransferAccepted", callback)

    def on_file_transfer_remote_paused(self, callback: Callable) -> None:
        """Subscribe to FileTransferRemotePaused (peer, transfer, direction, paused)."""
        self._subscribe_signal("FileTransferRemotePaused", callback)

    def on_file_transfer_paused(self, callback: Callable) -> None:
        """Subscribe to FileTransferPaused (peer, transfer, direction)."""
        self._subscribe_signal("FileTransferPaused", callback)

    def _subscribe_signal(self, signal_name: str, callback: Callable) -> None:
        """Internal: subscribe to a D-Bus signal by name.

        Also records the subscription for re-establishment on reconnect.
        """
        def _do_subscribe():
            if not self._connected or not self._proxy:
                return
            try:
                sig = getattr(self._proxy, signal_name)
                sub = sig.connect(callback)
                self._subscriptions.append(sub)
            except Exception as e:
                logger.warning(f"Failed to subscribe to {signal_name}: {e}")

        self._pending_signal_setups.append(_do_subscribe)

        if not self._connected or not self._proxy:
            logger.warning(
                f"Cannot subscribe to {signal_name}: not connected (will retry on reconnect)"
            )
            return
        _do_subscribe()

    # ─── Cleanup ─────────────────────────────────────────────────────────

    def disconnect(self) -> None:
        """Disconnect and clean up signal subscriptions."""
        if self._name_watch_id is not None:
            try:
                from gi.repository import Gio
                Gio.bus_unwatch_name(self._name_watch_id)
            except Exception as e:
                logger.debug(f"Failed to remove name watch: {e}")
            self._name_watch_id = None
        for sub in self._subscriptions:
            try:
                sub.disconnect()
            except Exception as e:
                logger.debug(f"Failed to drop signal subscription: {e}")
        self._subscriptions.clear()
        self._pending_signal_setups.clear()
        self._proxy = None
        self._bus = None
        self._connected = False
        logger.info("Disconnected from transfer core")


def connect_transfer_core(
    bus_name: str = DEFAULT_CORE_BUS_NAME,
    required: bool = False,
    watch: bool = True,
) -> TransferCoreClient:
    """Create a client, optionally insisting that the core is reachable now.

    With ``watch`` the client follows the core on the bus, so signal
    subscriptions made later survive a core restart.

    Raises:
        CoreUnavailableError: If ``required`` and the core is not on the bus
    """
    client = TransferCoreClient(bus_name)
    if required and not client.is_connected:
        raise CoreUnavailableError(f"Transfer core {bus_name} is not running")
    if watch:
        client.watch_name()
    return client
