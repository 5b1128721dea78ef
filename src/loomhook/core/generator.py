"""
Pattern generator: closed-form cell rules for each weave family.

Every family is a periodic function of (pick, hook):
- PLAIN:  Up where (hook + pick) mod 2 == 0           (repeat 2)
- TWILL:  Up where (hook + pick) mod 4 < 2            (repeat 4)
- SATIN:  Up where (2*hook + pick) mod 5 == 0         (repeat 5)
- BASKET: Up where (hook//2 + pick//2) mod 2 == 0     (repeat 4)
- CUSTOM: every cell Neutral

Everything not Up is Down. The generator is a pure lookup, not a loom
simulation: identical arguments always give an identical matrix.
"""

from __future__ import annotations

import numpy as np

from loomhook.core.families import WeaveFamily
from loomhook.core.hooks import HookState
from loomhook.core.matrix import PatternMatrix, check_dimensions


def _plain(pick, hook):
    return (hook + pick) % 2 == 0


def _twill(pick, hook):
    return (hook + pick) % 4 < 2


def _satin(pick, hook):
    # Literal rule; only some alignments give a textbook 5-end satin
    return (2 * hook + pick) % 5 == 0


def _basket(pick, hook):
    return (hook // 2 + pick // 2) % 2 == 0


_RULES = {
    WeaveFamily.PLAIN: _plain,
    WeaveFamily.TWILL: _twill,
    WeaveFamily.SATIN: _satin,
    WeaveFamily.BASKET: _basket,
}


def cell_state(family: WeaveFamily, pick: int, hook: int) -> HookState:
    """State of a single (pick, hook) cell under a family's rule."""
    family = WeaveFamily.parse(family)
    if family is WeaveFamily.CUSTOM:
        return HookState.NEUTRAL
    return HookState.UP if _RULES[family](pick, hook) else HookState.DOWN


def generate(family: WeaveFamily, pick_count: int, hook_count: int) -> PatternMatrix:
    """
    Generate the full matrix for a weave family.

    Args:
        family: Weave family to generate
        pick_count: Number of picks (rows), >= 1
        hook_count: Number of hooks (columns), >= 1

    Returns:
        New PatternMatrix; editable only for CUSTOM

    Raises:
        InvalidDimensions: if either count is not a positive integer
    """
    family = WeaveFamily.parse(family)
    pick_count, hook_count = check_dimensions(pick_count, hook_count)

    if family is WeaveFamily.CUSTOM:
        return PatternMatrix.blank(pick_count, hook_count, family=family)

    # Evaluate the rule over the whole grid at once
    pick, hook = np.ogrid[:pick_count, :hook_count]
    up = _RULES[family](pick, hook)
    cells = np.where(up, int(HookState.UP), int(HookState.DOWN)).astype(np.int8)
    return PatternMatrix(cells, family=family)
