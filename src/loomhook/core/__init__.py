"""
Core engine primitives.

This layer knows NOTHING about images, vision services or file formats.
It only knows:
- Hook states and the Up -> Down -> Neutral editing cycle
- Weave families and their closed-form generation rules
- The pattern matrix (bounds-checked, resizable, editable in custom mode)
- The playback cursor that walks the picks
"""

from loomhook.core.hooks import HookState, cycle, CYCLE_LENGTH
from loomhook.core.families import WeaveFamily, FamilyInfo, FAMILY_CATALOGUE
from loomhook.core.matrix import PatternMatrix, check_dimensions, cells_equal
from loomhook.core.generator import generate, cell_state
from loomhook.core.playback import PlaybackScheduler, PlaybackConfig, PlaybackStatus

__all__ = [
    "HookState",
    "cycle",
    "CYCLE_LENGTH",
    "WeaveFamily",
    "FamilyInfo",
    "FAMILY_CATALOGUE",
    "PatternMatrix",
    "check_dimensions",
    "cells_equal",
    "generate",
    "cell_state",
    "PlaybackScheduler",
    "PlaybackConfig",
    "PlaybackStatus",
]
