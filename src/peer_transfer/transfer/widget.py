"""Controller for a single file transfer shown in the chat log."""

import logging
import time
from typing import TYPE_CHECKING, Callable, List, Optional

from PIL import Image

from ..config import PeerTransferConfig
from ..exceptions import ReentrantUpdateError, TransferStateError
from ..ui.renderer import render_transfer
from ..ui.utils import format_duration, format_size, format_speed
from ..utils.validation_helpers import default_save_path, is_file_writable
from .models import (
    ControlAction,
    IdSequence,
    TransferDirection,
    TransferFile,
    TransferIdentity,
    TransferState,
)
from .preview import load_preview_from_file

if TYPE_CHECKING:
    from ..service.core_client import TransferCoreClient

logger = logging.getLogger(__name__)

NOT_WRITABLE_TITLE = "Location not writable"
NOT_WRITABLE_TEXT = (
    "You do not have permission to write that location. "
    "Choose another, or cancel the save dialog."
)

StateListener = Callable[["TransferWidget"], None]
SavePathPrompt = Callable[[str], Optional[str]]
WarningSink = Callable[[str, str], None]


class TransferWidget:
    """
    State of one file transfer plus the actions the user can take on it.

    The core reports progress and state changes through the ``report_*``
    methods; each carries the transfer identity and is ignored when it does
    not match. Listeners registered with :meth:`connect` are called
    synchronously after every change and are expected to re-render.

    Once the transfer is canceled or finished the widget detaches from its
    notification source and never changes again.
    """

    def __init__(
        self,
        file: TransferFile,
        core: "TransferCoreClient",
        id_sequence: IdSequence,
        config: Optional[PeerTransferConfig] = None,
        prompt_save_path: Optional[SavePathPrompt] = None,
        warn: Optional[WarningSink] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the widget.

        Args:
            file: Transfer as announced by the core
            core: Client used to forward user actions to the core
            id_sequence: Source of the widget id
            config: Configuration (defaults if None)
            prompt_save_path: Asks the user for a destination; receives the
                suggested path, returns the chosen one or None to abort
            warn: Shows a warning as (title, text)
            clock: Monotonic time source in seconds
        """
        self.config = config or PeerTransferConfig.defaults()
        self.id = id_sequence.next_id()
        self.identity = file.identity
        self.state = TransferState.PENDING
        self.remote_paused = False

        self.filename = file.filename
        self.save_path: Optional[str] = None
        self.size = format_size(file.file_size)
        self.speed = "0B/s"
        self.eta = "00:00"

        self._clock = clock
        self.last_update = clock()
        self.last_bytes_transferred = 0

        self.preview: Optional[Image.Image] = None
        if file.direction == TransferDirection.SENDING and file.file_path:
            self.preview = load_preview_from_file(file.file_path, self.config.preview)

        self._core = core
        self._prompt_save_path = prompt_save_path
        self._warn = warn
        self._listeners: List[StateListener] = []
        self._emitting = False
        self._detached = False
        self._prompting = False
        self._on_detach: Optional[Callable[[], None]] = None

        logger.debug(
            f"Transfer widget {self.id} created for {self.filename!r} "
            f"({self.direction.name.lower()})"
        )

    @property
    def direction(self) -> TransferDirection:
        return self.identity.direction

    @property
    def peer_id(self) -> int:
        return self.identity.peer_id

    @property
    def transfer_id(self) -> int:
        return self.identity.transfer_id

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    @property
    def is_detached(self) -> bool:
        return self._detached

    # ─── Listeners ───────────────────────────────────────────────────────

    def connect(self, listener: StateListener) -> None:
        """Register a callback fired after every state change."""
        self._listeners.append(listener)

    def disconnect(self, listener: StateListener) -> None:
        """Remove a previously registered callback."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def attach(self, on_detach: Callable[[], None]) -> None:
        """Set the callback that unregisters this widget from its notification source."""
        self._on_detach = on_detach

    def _emit_state_updated(self) -> None:
        """Notify listeners synchronously."""
        self._emitting = True
        try:
            for listener in list(self._listeners):
                try:
                    listener(self)
                except Exception as e:
                    logger.error(f"State listener failed for transfer {self.id}: {e}", exc_info=True)
        finally:
            self._emitting = False

    def _check_not_emitting(self) -> None:
        if self._emitting:
            raise ReentrantUpdateError(
                f"Transfer {self.id} cannot be modified from its own state listener"
            )

    def _detach(self) -> None:
        if self._detached:
            return
        self._detached = True
        if self._on_detach is not None:
            self._on_detach()
            self._on_detach = None
        logger.debug(f"Transfer widget {self.id} detached")

    def _accepts(self, peer_id: int, transfer_id: int, direction: TransferDirection) -> bool:
        """Whether a notification is addressed to this transfer and may still apply."""
        self._check_not_emitting()
        if self._detached or self.state.is_terminal:
            return False
        return self.identity.matches(peer_id, transfer_id, direction)

    def _set_state(self, new_state: TransferState) -> None:
        if new_state != self.state:
            logger.debug(f"Transfer {self.id}: {self.state.value} -> {new_state.value}")
        self.state = new_state

    # ─── Notifications from the core ─────────────────────────────────────

    def report_progress(
        self,
        peer_id: int,
        transfer_id: int,
        total_size: int,
        bytes_transferred: int,
        direction: TransferDirection,
    ) -> None:
        """Update size, speed and ETA from a progress notification."""
        if not self._accepts(peer_id, transfer_id, direction):
            return

        now = self._clock()
        elapsed = now - self.last_update
        if elapsed <= 0:
            return

        delta = bytes_transferred - self.last_bytes_transferred
        if delta < 0:
            logger.warning(
                f"Negative transfer speed for transfer {self.id} "
                f"({bytes_transferred} < {self.last_bytes_transferred}), clamping to 0"
            )
            delta = 0

        throughput = delta / elapsed
        self.speed = format_speed(throughput)
        self.size = format_size(total_size)
        if throughput:
            self.eta = format_duration((total_size - bytes_transferred) / throughput)

        self.last_update = now
        self.last_bytes_transferred = bytes_transferred
        self._emit_state_updated()

    def report_cancelled(self, peer_id: int, transfer_id: int, direction: TransferDirection) -> None:
        """The transfer was cancelled by either side."""
        if not self._accepts(peer_id, transfer_id, direction):
            return
        self._mark_cancelled()

    def report_finished(
        self,
        peer_id: int,
        transfer_id: int,
        direction: TransferDirection,
        file_path: Optional[str] = None,
    ) -> None:
        """The transfer completed; incoming files get a preview when possible."""
        if not self._accepts(peer_id, transfer_id, direction):
            return
        self._detach()

        if direction == TransferDirection.RECEIVING and file_path:
            preview = load_preview_from_file(file_path, self.config.preview)
            if preview is not None:
                self.preview = preview

        self._set_state(TransferState.FINISHED)
        self._emit_state_updated()

    def report_accepted(self, peer_id: int, transfer_id: int, direction: TransferDirection) -> None:
        """The transfer was accepted (or resumed) and bytes are flowing."""
        if not self._accepts(peer_id, transfer_id, direction):
            return
        self.remote_paused = False
        self._set_state(TransferState.PROCESSING)
        self._emit_state_updated()

    def report_remote_pause(
        self,
        peer_id: int,
        transfer_id: int,
        direction: TransferDirection,
        paused: bool,
    ) -> None:
        """The peer paused or unpaused the transfer."""
        if not self._accepts(peer_id, transfer_id, direction):
            return
        self.remote_paused = bool(paused)
        self._emit_state_updated()

    def report_paused(self, peer_id: int, transfer_id: int, direction: TransferDirection) -> None:
        """The core confirmed a local pause."""
        if not self._accepts(peer_id, transfer_id, direction):
            return
        self._set_state(TransferState.PAUSED)
        self._emit_state_updated()

    def _mark_cancelled(self) -> None:
        self._detach()
        self._set_state(TransferState.CANCELED)
        self._emit_state_updated()

    # ─── User actions ────────────────────────────────────────────────────

    def cancel(self) -> None:
        """Ask the core to cancel the transfer."""
        self._check_not_emitting()
        if self.state.is_terminal:
            return
        self._core.cancel_file_send(self.peer_id, self.transfer_id)
        self._mark_cancelled()

    def reject_receive(self) -> None:
        """Refuse an incoming transfer (or abort one in progress)."""
        self._check_not_emitting()
        if self.state.is_terminal:
            return
        self._core.reject_file_recv_request(self.peer_id, self.transfer_id)
        self._mark_cancelled()

    def accept_receive(self) -> None:
        """
        Ask the user where to save an incoming file and accept it.

        The prompt repeats until a writable location is chosen; an empty
        answer aborts without changing anything. The prompt may run a
        nested main loop, so a cancel arriving while it is open wins and
        a second call while it is open does nothing.

        Raises:
            TransferStateError: If this is not an incoming transfer or no
                save prompt was provided
        """
        self._check_not_emitting()
        if self.direction != TransferDirection.RECEIVING:
            raise TransferStateError(f"Transfer {self.id} is outgoing and cannot be accepted")
        if self.state != TransferState.PENDING or self._prompting:
            return
        if self._prompt_save_path is None:
            raise TransferStateError(f"Transfer {self.id} has no save prompt to choose a destination")

        self._prompting = True
        try:
            path = self._ask_writable_path()
        finally:
            self._prompting = False
        if not path:
            return
        if self._detached or self.state != TransferState.PENDING:
            logger.debug(f"Transfer {self.id} became {self.state.value} while choosing a destination")
            return

        self.save_path = str(path)
        self._core.accept_file_recv_request(self.peer_id, self.transfer_id, self.save_path)
        self._set_state(TransferState.PROCESSING)
        self._emit_state_updated()

    def _ask_writable_path(self) -> Optional[str]:
        suggested = default_save_path(self.config.downloads.resolve_directory(), self.filename)
        while True:
            path = self._prompt_save_path(suggested)
            if not path:
                logger.debug(f"Save dialog for transfer {self.id} dismissed")
                return None
            if self._detached or self.state != TransferState.PENDING:
                return None
            if is_file_writable(path):
                return path
            logger.warning(f"Cannot write to {path}, asking again")
            if self._warn is not None:
                self._warn(NOT_WRITABLE_TITLE, NOT_WRITABLE_TEXT)
            suggested = path

    def toggle_pause_receive(self) -> None:
        """Ask the core to pause or resume an incoming transfer."""
        self._check_not_emitting()
        if not self._can_toggle_pause():
            return
        self._core.pause_resume_file_recv(self.peer_id, self.transfer_id)
        self._emit_state_updated()

    def toggle_pause_send(self) -> None:
        """Ask the core to pause or resume an outgoing transfer."""
        self._check_not_emitting()
        if not self._can_toggle_pause():
            return
        self._core.pause_resume_file_send(self.peer_id, self.transfer_id)
        self._emit_state_updated()

    def _can_toggle_pause(self) -> bool:
        # State flips only when the core confirms through report_paused/report_accepted
        return self.state.is_active and not self.remote_paused

    def press(self, action: ControlAction) -> None:
        """Dispatch a click on one of the two rendered controls."""
        if self.state.is_terminal:
            return

        if self.direction == TransferDirection.SENDING:
            if action == ControlAction.PRIMARY:
                self.cancel()
            else:
                self.toggle_pause_send()
        else:
            if action == ControlAction.PRIMARY:
                self.reject_receive()
            elif self.state == TransferState.PENDING:
                self.accept_receive()
            else:
                self.toggle_pause_receive()

    # ─── Rendering ───────────────────────────────────────────────────────

    def render(self) -> str:
        """Current state as an HTML fragment for the chat log."""
        return render_transfer(self)
