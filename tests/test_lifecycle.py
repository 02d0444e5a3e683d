"""Tests for the UI channel state machine."""
from __future__ import annotations

import pytest

from brandbridge.engine.lifecycle import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    ChannelState,
    validate_transition,
)


def test_happy_path_transitions():
    validate_transition(ChannelState.LISTENING, ChannelState.AWAITING_UPGRADE)
    validate_transition(ChannelState.AWAITING_UPGRADE, ChannelState.STREAMING)
    validate_transition(ChannelState.STREAMING, ChannelState.CLOSED_CLEAN)
    validate_transition(ChannelState.STREAMING, ChannelState.CLOSED_ERROR)


def test_cancel_before_connect_is_allowed():
    validate_transition(ChannelState.AWAITING_UPGRADE, ChannelState.CLOSED_CLEAN)


def test_cannot_stream_twice():
    with pytest.raises(ValueError, match="streaming -> streaming"):
        validate_transition(ChannelState.STREAMING, ChannelState.STREAMING)


@pytest.mark.parametrize("state", sorted(TERMINAL_STATES, key=lambda s: s.value))
def test_terminal_states_have_no_exits(state):
    assert VALID_TRANSITIONS[state] == set()
    with pytest.raises(ValueError, match="terminal"):
        validate_transition(state, ChannelState.LISTENING)
