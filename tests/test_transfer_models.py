"""Tests for transfer data models."""

import pytest

from peer_transfer.transfer.models import (
    ControlAction,
    IdSequence,
    TransferDirection,
    TransferFile,
    TransferIdentity,
    TransferState,
)


class TestIdSequence:
    """Ids come from an owned sequence, not a global counter."""

    def test_sequential_ids(self):
        seq = IdSequence()
        assert [seq.next_id() for _ in range(3)] == [0, 1, 2]

    def test_sequences_are_independent(self):
        a, b = IdSequence(), IdSequence(start=10)
        assert a.next_id() == 0
        assert b.next_id() == 10
        assert a.next_id() == 1


class TestTransferIdentity:

    def test_matches_full_triple_only(self):
        identity = TransferIdentity(1, 2, TransferDirection.SENDING)
        assert identity.matches(1, 2, TransferDirection.SENDING)
        assert not identity.matches(9, 2, TransferDirection.SENDING)
        assert not identity.matches(1, 9, TransferDirection.SENDING)
        assert not identity.matches(1, 2, TransferDirection.RECEIVING)

    def test_hashable_and_frozen(self):
        identity = TransferIdentity(1, 2, TransferDirection.SENDING)
        assert {identity: "x"}[TransferIdentity(1, 2, TransferDirection.SENDING)] == "x"
        with pytest.raises(AttributeError):
            identity.peer_id = 5

    def test_file_identity(self, incoming_file):
        assert incoming_file.identity == TransferIdentity(3, 7, TransferDirection.RECEIVING)


class TestTransferState:

    def test_terminal_states(self):
        assert {s for s in TransferState if s.is_terminal} == {
            TransferState.CANCELED,
            TransferState.FINISHED,
        }

    def test_active_states(self):
        assert {s for s in TransferState if s.is_active} == {
            TransferState.PROCESSING,
            TransferState.PAUSED,
        }


def test_direction_wire_values():
    assert TransferDirection(0) is TransferDirection.SENDING
    assert TransferDirection(1) is TransferDirection.RECEIVING


def test_control_action_codes():
    assert ControlAction("btnA") is ControlAction.PRIMARY
    assert ControlAction("btnB") is ControlAction.SECONDARY


def test_transfer_file_optional_path():
    file = TransferFile(1, 1, TransferDirection.SENDING, "a.txt", 3)
    assert file.file_path is None
