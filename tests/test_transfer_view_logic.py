"""Logic tests for click routing without GTK runtime."""

from peer_transfer.transfer.models import ControlAction
from peer_transfer.ui.transfer_view_logic import parse_click_target


def test_parse_primary_control():
    assert parse_click_target("data:ftrans.12.btnA/png;base64,iVBOR") == (12, ControlAction.PRIMARY)


def test_parse_secondary_control():
    assert parse_click_target("data:ftrans.0.btnB/png;base64,") == (0, ControlAction.SECONDARY)


def test_surrounding_whitespace_ignored():
    assert parse_click_target("  data:ftrans.3.btnA/png;base64,x ") == (3, ControlAction.PRIMARY)


def test_non_controls_rejected():
    assert parse_click_target("data:mini.3/png;base64,xyz") is None
    assert parse_click_target("data:placeholder/png;base64,xyz") is None
    assert parse_click_target("data:ftrans.3.btnC/png;base64,xyz") is None
    assert parse_click_target("data:ftrans.x.btnA/png;base64,xyz") is None
    assert parse_click_target("https://example.org/ftrans.3.btnA/") is None


def test_empty_input():
    assert parse_click_target("") is None
    assert parse_click_target(None) is None
