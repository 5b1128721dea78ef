"""
Import normalizer: turns an external candidate matrix into a PatternMatrix.

Rules:
1. The candidate must be a non-empty list of equal-length, non-empty rows
2. Each cell must be a real number: > 0 is Up, < 0 is Down, 0 is Neutral
3. Dimensions come from the candidate's own shape. repeatWidth/repeatHeight
   are descriptive and never used to crop or pad
4. The result is CUSTOM and editable

Anything else is rejected with MalformedPattern; nothing is coerced.
"""

from __future__ import annotations
import logging
import math
from numbers import Real
from typing import Any, Mapping

import numpy as np

from loomhook.analysis.result import AnalysisResult
from loomhook.core.families import WeaveFamily
from loomhook.core.hooks import HookState
from loomhook.core.matrix import PatternMatrix
from loomhook.errors import MalformedPattern

logger = logging.getLogger(__name__)


def _candidate(raw: AnalysisResult | Mapping[str, Any]) -> Any:
    if isinstance(raw, AnalysisResult):
        return raw.hook_pattern
    if isinstance(raw, Mapping):
        return raw.get("hookPattern")
    raise MalformedPattern(f"Cannot normalize a {type(raw).__name__}")


def _cell_state(value: Any, pick: int, hook: int) -> HookState:
    # bool is an int subclass but a JSON true/false is not a hook position
    if isinstance(value, bool) or not isinstance(value, Real):
        raise MalformedPattern(f"Cell ({pick}, {hook}) is not numeric: {value!r}")
    if isinstance(value, float) and math.isnan(value):
        raise MalformedPattern(f"Cell ({pick}, {hook}) is NaN")
    if value > 0:
        return HookState.UP
    if value < 0:
        return HookState.DOWN
    return HookState.NEUTRAL


def normalize(raw: AnalysisResult | Mapping[str, Any]) -> PatternMatrix:
    """
    Build a CUSTOM, editable matrix from an analysis result.

    Args:
        raw: AnalysisResult, or a mapping with a "hookPattern" key

    Returns:
        New PatternMatrix shaped like the candidate

    Raises:
        MalformedPattern: candidate absent, empty, ragged or non-numeric
    """
    rows = _candidate(raw)

    if rows is None:
        raise MalformedPattern("Analysis has no hookPattern")
    if not isinstance(rows, (list, tuple)) or len(rows) == 0:
        raise MalformedPattern("hookPattern must be a non-empty list of rows")
    if not all(isinstance(row, (list, tuple)) for row in rows):
        raise MalformedPattern("Every hookPattern row must be a list")

    hook_count = len(rows[0])
    if hook_count == 0:
        raise MalformedPattern("hookPattern rows are empty")
    lengths = [len(row) for row in rows]
    if any(n != hook_count for n in lengths):
        logger.warning("Rejected non-rectangular hookPattern with row lengths %s", lengths)
        raise MalformedPattern(
            f"hookPattern is not rectangular: row lengths {lengths}"
        )

    cells = np.empty((len(rows), hook_count), dtype=np.int8)
    for pick, row in enumerate(rows):
        for hook, value in enumerate(row):
            cells[pick, hook] = int(_cell_state(value, pick, hook))

    matrix = PatternMatrix(cells, family=WeaveFamily.CUSTOM, editable=True)
    logger.debug("Normalized hookPattern into %d picks x %d hooks", *matrix.shape)
    return matrix
