"""Tests for the HTML rendering of transfers."""

import base64
import re

import pytest
from PIL import Image

from peer_transfer.transfer.models import TransferDirection, TransferFile, TransferState
from peer_transfer.ui.renderer import (
    ButtonGlyph,
    TRANSFER_CSS,
    draw_glyph,
    glyph_base64,
    render_transfer,
    select_right_glyph,
)

RECV = TransferDirection.RECEIVING
SEND = TransferDirection.SENDING


def _alts(markup: str) -> list:
    return re.findall(r'alt="([^"]+)"', markup)


def _control_alt(markup: str, widget_id: int, code: str) -> str:
    match = re.search(rf'<img src="data:ftrans\.{widget_id}\.{code}/png;base64,[^"]+" alt="([^"]+)">', markup)
    assert match, f"no {code} control in markup"
    return match.group(1)


class TestSelectRightGlyph:

    @pytest.mark.parametrize(
        "state,direction,expected",
        [
            (TransferState.PROCESSING, SEND, ButtonGlyph.PAUSE),
            (TransferState.PROCESSING, RECV, ButtonGlyph.PAUSE),
            (TransferState.PAUSED, SEND, ButtonGlyph.RESUME),
            (TransferState.PAUSED, RECV, ButtonGlyph.RESUME),
            (TransferState.PENDING, RECV, ButtonGlyph.ACCEPT),
            (TransferState.PENDING, SEND, ButtonGlyph.PAUSE_GREY),
        ],
    )
    def test_by_state(self, state, direction, expected):
        assert select_right_glyph(state, direction, remote_paused=False) == expected

    @pytest.mark.parametrize("state", [TransferState.PENDING, TransferState.PROCESSING, TransferState.PAUSED])
    @pytest.mark.parametrize("direction", [SEND, RECV])
    def test_remote_pause_overrides(self, state, direction):
        assert select_right_glyph(state, direction, remote_paused=True) == ButtonGlyph.PAUSE_GREY


class TestRenderActive:

    def test_pending_receive_has_accept_control(self, make_widget, incoming_file):
        widget = make_widget(incoming_file)
        markup = render_transfer(widget)
        assert _control_alt(markup, widget.id, "btnA") == "stop"
        assert _control_alt(markup, widget.id, "btnB") == "accept"
        assert "<div class=silver>" in markup

    def test_pending_send_has_greyed_pause(self, make_widget, outgoing_file):
        widget = make_widget(outgoing_file)
        assert _control_alt(widget.render(), widget.id, "btnB") == "pause-disabled"

    def test_processing_remote_paused_is_disabled(self, make_widget, incoming_file):
        widget = make_widget(incoming_file)
        widget.report_accepted(3, 7, RECV)
        assert _control_alt(widget.render(), widget.id, "btnB") == "pause"

        widget.report_remote_pause(3, 7, RECV, True)
        assert _control_alt(widget.render(), widget.id, "btnB") == "pause-disabled"

    def test_paused_shows_resume(self, make_widget, outgoing_file):
        widget = make_widget(outgoing_file)
        widget.report_accepted(3, 8, SEND)
        widget.report_paused(3, 8, SEND)
        assert _control_alt(widget.render(), widget.id, "btnB") == "resume"

    def test_progress_line(self, make_widget, incoming_file, clock):
        widget = make_widget(incoming_file)
        clock.advance(2)
        widget.report_progress(3, 7, 10000, 4096, RECV)
        markup = widget.render()
        assert "<p>holiday.png</p>" in markup
        assert "<p>4.00kiB / 9.77kiB&nbsp;(2.00kiB/s ETA: 00:02)</p>" in markup

    def test_filename_escaped(self, make_widget):
        widget = make_widget(TransferFile(1, 1, RECV, "<b>x</b>&.png", 1))
        markup = widget.render()
        assert "<b>x</b>" not in markup
        assert "&lt;b&gt;x&lt;/b&gt;&amp;.png" in markup

    def test_controls_namespaced_by_id(self, make_widget, incoming_file, outgoing_file):
        make_widget(incoming_file)
        second = make_widget(outgoing_file)
        markup = second.render()
        assert f"data:ftrans.{second.id}.btnA/" in markup
        assert f"data:ftrans.{second.id}.btnB/" in markup
        assert "data:ftrans.0." not in markup


class TestRenderTerminal:

    def test_cancelled_is_red_without_controls(self, make_widget, outgoing_file):
        widget = make_widget(outgoing_file)
        widget.cancel()
        markup = widget.render()
        assert "<div class=red>" in markup
        assert "data:ftrans." not in markup
        assert _alts(markup) == ["empty", "empty"]
        assert "<p>report.pdf</p><p>1.00MiB</p>" in markup

    def test_finished_is_green_with_thumbnail(self, make_widget, incoming_file, sample_png):
        widget = make_widget(incoming_file)
        widget.report_finished(3, 7, RECV, str(sample_png))
        markup = widget.render()
        assert "<div class=green>" in markup
        assert "data:ftrans." not in markup
        assert f'<img src="data:mini.{widget.id}/png;base64,' in markup

    def test_finished_without_preview(self, make_widget, incoming_file):
        widget = make_widget(incoming_file)
        widget.report_finished(3, 7, RECV, None)
        markup = widget.render()
        assert "data:mini." not in markup
        assert markup.startswith('<table width=100% cellspacing="0">')


class TestGlyphs:

    @pytest.mark.parametrize("glyph", list(ButtonGlyph))
    def test_every_glyph_draws(self, glyph):
        image = draw_glyph(glyph)
        assert isinstance(image, Image.Image)
        assert image.size == (24, 24)

    def test_glyph_base64_cached_png(self):
        encoded = glyph_base64(ButtonGlyph.STOP)
        assert glyph_base64(ButtonGlyph.STOP) is encoded
        assert base64.b64decode(encoded)[:4] == b"\x89PNG"


def test_css_defines_tints():
    for cls in ("div.silver", "div.red", "div.green", "div.button"):
        assert cls in TRANSFER_CSS
