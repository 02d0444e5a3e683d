"""UI channel state machine.

Defines valid transitions and enforces them. Invalid transitions
raise ValueError rather than silently proceeding.

State Diagram:

    LISTENING ──> AWAITING_UPGRADE ──> STREAMING ──┬──> CLOSED_CLEAN
                                                   │
                                                   └──> CLOSED_ERROR

    LISTENING / AWAITING_UPGRADE ──> CLOSED_CLEAN  (cancelled before a client connected)
    LISTENING / AWAITING_UPGRADE ──> CLOSED_ERROR
"""
from __future__ import annotations

from enum import Enum


class ChannelState(str, Enum):
    LISTENING = "listening"
    AWAITING_UPGRADE = "awaiting_upgrade"
    STREAMING = "streaming"
    CLOSED_CLEAN = "closed_clean"
    CLOSED_ERROR = "closed_error"


TERMINAL_STATES = frozenset({ChannelState.CLOSED_CLEAN, ChannelState.CLOSED_ERROR})

VALID_TRANSITIONS: dict[ChannelState, set[ChannelState]] = {
    ChannelState.LISTENING: {
        ChannelState.AWAITING_UPGRADE,
        ChannelState.CLOSED_CLEAN,
        ChannelState.CLOSED_ERROR,
    },
    ChannelState.AWAITING_UPGRADE: {
        ChannelState.STREAMING,
        ChannelState.CLOSED_CLEAN,
        ChannelState.CLOSED_ERROR,
    },
    ChannelState.STREAMING: {
        ChannelState.CLOSED_CLEAN,
        ChannelState.CLOSED_ERROR,
    },
    ChannelState.CLOSED_CLEAN: set(),
    ChannelState.CLOSED_ERROR: set(),
}


def validate_transition(current: ChannelState, target: ChannelState) -> None:
    """Validate a state transition. Raises ValueError if invalid."""
    allowed = VALID_TRANSITIONS.get(current, set())
    if target not in allowed:
        allowed_str = ", ".join(sorted(s.value for s in allowed)) or "none (terminal)"
        raise ValueError(
            f"Invalid channel transition: {current.value} -> {target.value}. "
            f"Allowed from {current.value}: {allowed_str}"
        )
