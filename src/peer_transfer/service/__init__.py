"""D-Bus access to the external transfer core."""

from importlib import import_module

__all__ = [
    "TransferCoreClient",
    "connect_transfer_core",
]

_LAZY_EXPORTS = {
    "TransferCoreClient": ("core_client", "TransferCoreClient"),
    "connect_transfer_core": ("core_client", "connect_transfer_core"),
}


def __getattr__(name):
    """Lazily import service modules so pydbus is only needed when used."""
    if name in _LAZY_EXPORTS:
        module_name, attr_name = _LAZY_EXPORTS[name]
        module = import_module(f".{module_name}", __name__)
        value = getattr(module, attr_name)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
