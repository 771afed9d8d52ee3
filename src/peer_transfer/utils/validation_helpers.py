"""Helpers for validating user-chosen destinations."""

import logging
import os
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


def is_file_writable(path: Union[str, Path]) -> bool:
    """Check that a file can be written at ``path`` by actually opening it.

    ``os.access`` cannot answer for a file that does not exist yet, so the
    file is opened for writing and removed again if this call created it.
    Existing files are opened in append mode and left untouched.

    Args:
        path: Destination chosen by the user

    Returns:
        True if the location accepts writes
    """
    target = Path(path)
    existed = target.exists()
    try:
        with open(target, "ab"):
            pass
    except OSError as e:
        logger.debug(f"{target} is not writable: {e}")
        return False

    if not existed:
        try:
            os.remove(target)
        except OSError as e:
            logger.warning(f"Could not remove test file {target}: {e}")
    return True


def default_save_path(directory: Union[str, Path], filename: str) -> str:
    """Build the path offered by the save dialog.

    Only the final component of ``filename`` is kept so a peer cannot
    suggest a location outside ``directory``.
    """
    name = Path(filename).name or "download"
    return str(Path(directory) / name)
