"""GTK dialogs used while accepting an incoming file."""

import logging
from pathlib import Path
from typing import Optional

import gi
gi.require_version('Gtk', '4.0')
from gi.repository import Gio, GLib, Gtk

logger = logging.getLogger(__name__)


class GtkSavePrompt:
    """Save-file prompt and warning sink for :class:`TransferWidget`.

    ``TransferWidget.accept_receive`` needs an answer before it can go on,
    so :meth:`ask` runs a nested main loop until the native file chooser
    responds.
    """

    def __init__(self, parent: Optional[Gtk.Window] = None):
        self.parent = parent

    def ask(self, suggested_path: str) -> Optional[str]:
        """Return the chosen path, or None if the dialog was dismissed."""
        suggested = Path(suggested_path)
        chooser = Gtk.FileChooserNative(
            title="Save a file",
            transient_for=self.parent,
            action=Gtk.FileChooserAction.SAVE,
            accept_label="_Save",
            cancel_label="_Cancel",
        )
        chooser.set_modal(True)
        chooser.set_current_name(suggested.name)
        if suggested.parent.is_dir():
            try:
                chooser.set_current_folder(Gio.File.new_for_path(str(suggested.parent)))
            except GLib.Error as e:
                logger.debug(f"Cannot preselect {suggested.parent}: {e}")

        loop = GLib.MainLoop()
        chosen: list[Optional[str]] = [None]

        def on_response(dialog, response):
            if response == Gtk.ResponseType.ACCEPT:
                file = dialog.get_file()
                chosen[0] = file.get_path() if file is not None else None
            dialog.destroy()
            loop.quit()

        chooser.connect("response", on_response)
        chooser.show()
        loop.run()
        return chosen[0]

    def warn(self, title: str, text: str) -> Gtk.MessageDialog:
        """Show a non-fatal warning and return the dialog."""
        dialog = Gtk.MessageDialog(
            transient_for=self.parent,
            modal=True,
            message_type=Gtk.MessageType.WARNING,
            buttons=Gtk.ButtonsType.NONE,
            text=title,
        )
        dialog.format_secondary_text(text)
        dialog.add_button("Close", Gtk.ResponseType.CLOSE)
        dialog.connect("response", lambda d, _response: d.close())
        dialog.present()
        return dialog
