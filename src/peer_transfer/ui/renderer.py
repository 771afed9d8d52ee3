"""HTML rendering of a transfer for the chat log.

The host view shows the fragment returned by :func:`render_transfer` and
routes clicks on its images back by their ``src`` attribute:

- ``data:ftrans.<id>.btnA/png;base64,...``  left control
- ``data:ftrans.<id>.btnB/png;base64,...``  right control
- ``data:mini.<id>/png;base64,...``         thumbnail (not clickable)
"""

import html
import logging
from enum import Enum
from functools import lru_cache
from typing import TYPE_CHECKING

from PIL import Image, ImageDraw

from ..transfer.models import ControlAction, TransferDirection, TransferState
from ..transfer.preview import image_to_base64
from .utils import format_size

if TYPE_CHECKING:
    from ..transfer.widget import TransferWidget

logger = logging.getLogger(__name__)

GLYPH_SIZE = 24

TINT_SILVER = "silver"
TINT_RED = "red"
TINT_GREEN = "green"

TRANSFER_CSS = """
div.silver { background-color: #e6e6e6; color: #202020; padding: 4px; }
div.red { background-color: #f4c7c7; color: #601010; padding: 4px; }
div.green { background-color: #c9efc9; color: #105010; padding: 4px; }
div.button { padding: 0px; }
"""


class ButtonGlyph(Enum):
    """Images drawn for the two controls; values are used as alt text."""
    STOP = "stop"
    PAUSE = "pause"
    RESUME = "resume"
    ACCEPT = "accept"
    PAUSE_GREY = "pause-disabled"
    EMPTY_RED = "empty-red"
    EMPTY_GREEN = "empty-green"

    @property
    def alt(self) -> str:
        if self in (ButtonGlyph.EMPTY_RED, ButtonGlyph.EMPTY_GREEN):
            return "empty"
        return self.value


_GLYPH_BACKGROUND = {
    ButtonGlyph.STOP: "#d9534f",
    ButtonGlyph.PAUSE: "#5b8fd9",
    ButtonGlyph.RESUME: "#5b8fd9",
    ButtonGlyph.ACCEPT: "#4cae4c",
    ButtonGlyph.PAUSE_GREY: "#b0b0b0",
    ButtonGlyph.EMPTY_RED: "#f4c7c7",
    ButtonGlyph.EMPTY_GREEN: "#c9efc9",
}


def draw_glyph(glyph: ButtonGlyph, size: int = GLYPH_SIZE) -> Image.Image:
    """Draw a control image with Pillow."""
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    draw.rounded_rectangle(
        [0, 0, size - 1, size - 1],
        radius=int(size * 0.2),
        fill=_GLYPH_BACKGROUND[glyph],
    )

    fg = "#ffffff" if glyph != ButtonGlyph.PAUSE_GREY else "#e8e8e8"
    lo, hi = int(size * 0.3), int(size * 0.7)
    if glyph == ButtonGlyph.STOP:
        draw.rectangle([lo, lo, hi, hi], fill=fg)
    elif glyph in (ButtonGlyph.PAUSE, ButtonGlyph.PAUSE_GREY):
        bar = max(2, int(size * 0.12))
        draw.rectangle([lo, lo, lo + bar, hi], fill=fg)
        draw.rectangle([hi - bar, lo, hi, hi], fill=fg)
    elif glyph == ButtonGlyph.RESUME:
        draw.polygon([(lo, lo), (hi, size // 2), (lo, hi)], fill=fg)
    elif glyph == ButtonGlyph.ACCEPT:
        draw.line(
            [(lo - 1, size // 2), (size // 2 - 1, hi), (hi + 1, lo)],
            fill=fg,
            width=max(2, size // 10),
        )
    return img


@lru_cache(maxsize=None)
def glyph_base64(glyph: ButtonGlyph) -> str:
    """Base64 PNG of a glyph, drawn once per process."""
    return image_to_base64(draw_glyph(glyph))


def select_right_glyph(state: TransferState, direction: TransferDirection, remote_paused: bool) -> ButtonGlyph:
    """Pick the right-hand control for an active transfer."""
    if remote_paused:
        return ButtonGlyph.PAUSE_GREY
    if state == TransferState.PROCESSING:
        return ButtonGlyph.PAUSE
    if state == TransferState.PAUSED:
        return ButtonGlyph.RESUME
    if direction == TransferDirection.SENDING:
        return ButtonGlyph.PAUSE_GREY
    return ButtonGlyph.ACCEPT


def control_src_prefix(widget_id: int, action: ControlAction) -> str:
    """The ``data:`` URI prefix that identifies a clickable control."""
    return f"data:ftrans.{widget_id}.{action.value}/png;base64,"


def _control_img(widget_id: int, action: ControlAction, glyph: ButtonGlyph) -> str:
    return f'<img src="{control_src_prefix(widget_id, action)}{glyph_base64(glyph)}" alt="{glyph.alt}">'


def _placeholder_img(glyph: ButtonGlyph) -> str:
    return f'<img src="data:placeholder/png;base64,{glyph_base64(glyph)}" alt="{glyph.alt}">'


def _miniature(widget: "TransferWidget", tint: str) -> str:
    if widget.preview is None:
        return ""
    encoded = image_to_base64(widget.preview)
    res = f"<td><div class={tint}>\n"
    res += f'<img src="data:mini.{widget.id}/png;base64,{encoded}" alt="preview">'
    res += "</div></td>\n"
    return res


def _wrap_into_form(widget: "TransferWidget", content: str, tint: str, img_a: str, img_b: str) -> str:
    res = '<table width=100% cellspacing="0">\n'
    res += "<tr valign=middle>\n"
    res += _miniature(widget, tint)
    res += "<td width=100%>\n"
    res += f"<div class={tint}>{content}</div>\n"
    res += "</td>\n"
    res += "<td>\n"
    res += f"<div class=button>{img_a}<br>{img_b}</div>\n"
    res += "</td>\n"
    res += "</tr>\n"
    res += "</table>\n"
    return res


def _draw_two_buttons_form(widget: "TransferWidget") -> str:
    right = select_right_glyph(widget.state, widget.direction, widget.remote_paused)
    img_a = _control_img(widget.id, ControlAction.PRIMARY, ButtonGlyph.STOP)
    img_b = _control_img(widget.id, ControlAction.SECONDARY, right)

    content = f"<p>{html.escape(widget.filename)}</p>"
    content += (
        f"<p>{format_size(widget.last_bytes_transferred)} / {widget.size}"
        f"&nbsp;({widget.speed} ETA: {widget.eta})</p>\n"
    )
    return _wrap_into_form(widget, content, TINT_SILVER, img_a, img_b)


def _draw_buttonless_form(widget: "TransferWidget", tint: str) -> str:
    glyph = ButtonGlyph.EMPTY_RED if tint == TINT_RED else ButtonGlyph.EMPTY_GREEN
    img = _placeholder_img(glyph)
    content = f"<p>{html.escape(widget.filename)}</p><p>{widget.size}</p>"
    return _wrap_into_form(widget, content, tint, img, img)


def render_transfer(widget: "TransferWidget") -> str:
    """
    Render the current state of a transfer as an HTML fragment.

    Args:
        widget: Transfer to render

    Returns:
        Markup for the chat log
    """
    logger.debug(f"Rendering transfer {widget.id} in state {widget.state.value}")
    if widget.state.is_terminal:
        tint = TINT_RED if widget.state == TransferState.CANCELED else TINT_GREEN
        return _draw_buttonless_form(widget, tint)
    return _draw_two_buttons_form(widget)
