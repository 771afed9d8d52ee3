"""Rendering and GTK integration for transfer widgets."""

from importlib import import_module

from .utils import format_duration, format_size, format_speed
from .transfer_view_logic import parse_click_target

__all__ = [
    "format_duration",
    "format_size",
    "format_speed",
    "parse_click_target",
    "render_transfer",
    "TRANSFER_CSS",
    "TransferLogBridge",
    "GtkSavePrompt",
]

_LAZY_EXPORTS = {
    "render_transfer": ("renderer", "render_transfer"),
    "TRANSFER_CSS": ("renderer", "TRANSFER_CSS"),
    "TransferLogBridge": ("transfer_view", "TransferLogBridge"),
    "GtkSavePrompt": ("dialogs", "GtkSavePrompt"),
}


def __getattr__(name):
    """Lazily import GTK-backed modules so the logic works without a display."""
    if name in _LAZY_EXPORTS:
        module_name, attr_name = _LAZY_EXPORTS[name]
        module = import_module(f".{module_name}", __name__)
        value = getattr(module, attr_name)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
