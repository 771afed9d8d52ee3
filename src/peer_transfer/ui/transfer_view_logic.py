"""Pure logic helpers for routing clicks in the chat log to transfers."""

import re
from typing import Optional

from ..transfer.models import ControlAction

_CONTROL_SRC = re.compile(r"^data:ftrans\.(\d+)\.(btnA|btnB)/")


def parse_click_target(src: str) -> Optional[tuple[int, ControlAction]]:
    """Decode the ``src`` of a clicked image into (widget id, action).

    Returns None for anything that is not a transfer control, such as
    thumbnails, placeholders or unrelated images.
    """
    match = _CONTROL_SRC.match((src or "").strip())
    if match is None:
        return None
    return int(match.group(1)), ControlAction(match.group(2))
