"""GObject bridge between transfer widgets and the chat log view."""

import logging
from typing import Optional

import gi
gi.require_version('Gtk', '4.0')
from gi.repository import GObject

from ..transfer.models import TransferFile
from ..transfer.registry import TransferManager
from ..transfer.widget import TransferWidget
from .transfer_view_logic import parse_click_target

logger = logging.getLogger(__name__)


class TransferLogBridge(GObject.Object):
    """Exposes transfers to a chat log that displays HTML.

    The view connects to ``transfer-updated`` and replaces the fragment of
    the given widget id with :meth:`render`. Clicked image sources are fed
    to :meth:`handle_click`.
    """

    __gsignals__ = {
        'transfer-updated': (GObject.SignalFlags.RUN_FIRST, None, (int,)),
    }

    def __init__(self, manager: TransferManager):
        super().__init__()
        self.manager = manager

    def add_transfer(self, file: TransferFile) -> TransferWidget:
        """Track a new transfer and announce its first rendering."""
        widget = self.manager.add_transfer(file)
        self.track(widget)
        self.emit('transfer-updated', widget.id)
        return widget

    def track(self, widget: TransferWidget) -> None:
        """Forward a widget's state changes as ``transfer-updated``."""
        widget.connect(self._on_widget_changed)

    def _on_widget_changed(self, widget: TransferWidget) -> None:
        self.emit('transfer-updated', widget.id)

    def render(self, widget_id: int) -> str:
        """Current markup for a widget, or an empty string if unknown."""
        widget = self.manager.get_by_id(widget_id)
        if widget is None:
            return ""
        return widget.render()

    def handle_click(self, src: str) -> bool:
        """
        Dispatch a click on an image of the chat log.

        Args:
            src: The clicked image's source URI

        Returns:
            True if the click belonged to a known transfer control
        """
        target = parse_click_target(src)
        if target is None:
            return False

        widget_id, action = target
        widget: Optional[TransferWidget] = self.manager.get_by_id(widget_id)
        if widget is None:
            logger.debug(f"Click for unknown transfer widget {widget_id}")
            return False

        widget.press(action)
        return True
