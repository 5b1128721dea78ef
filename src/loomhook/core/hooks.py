"""
Hook states: the atomic value of a pattern cell.

Each cell says what one warp hook does on one pick:
- UP: hook raised, warp over weft
- DOWN: hook lowered, weft over warp
- NEUTRAL: not decided yet

The integer values are the legacy encoding used in exported documents
(1 / -1 / 0). Inside the engine only the enum is used.
"""

from __future__ import annotations
from enum import IntEnum


class HookState(IntEnum):
    """Tri-state value of a single hook on a single pick."""

    UP = 1
    DOWN = -1
    NEUTRAL = 0

    @property
    def symbol(self) -> str:
        """One-character glyph for text dumps."""
        return _SYMBOLS[self]


_SYMBOLS = {
    HookState.UP: "^",
    HookState.DOWN: "v",
    HookState.NEUTRAL: "-",
}

# Editing order: Up -> Down -> Neutral -> Up
_CYCLE = {
    HookState.UP: HookState.DOWN,
    HookState.DOWN: HookState.NEUTRAL,
    HookState.NEUTRAL: HookState.UP,
}

CYCLE_LENGTH = len(_CYCLE)


def cycle(current: HookState) -> HookState:
    """Return the state that follows `current` in the editing cycle."""
    return _CYCLE[HookState(current)]
