"""
PatternMatrix: the hook state grid.

The matrix stores ONLY pattern content:
- One row per pick, one column per hook
- Cells hold legacy hook codes (1 / -1 / 0) in an int8 array
- The family it was generated from, and whether it may be edited

Dimensions are fixed for the lifetime of an instance. Changing them goes
through `resize`, which returns a new matrix and leaves this one untouched.
"""

from __future__ import annotations
from typing import Iterator, Sequence

import numpy as np

from loomhook.core.families import WeaveFamily
from loomhook.core.hooks import HookState, cycle
from loomhook.errors import (
    EditNotPermitted,
    InvalidDimensions,
    MalformedPattern,
    OutOfBounds,
)

LEGACY_CODES = frozenset(int(state) for state in HookState)


def check_dimensions(pick_count, hook_count) -> tuple[int, int]:
    """Validate a (pick_count, hook_count) pair and return it as ints."""
    for name, value in (("pick_count", pick_count), ("hook_count", hook_count)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidDimensions(f"{name} must be an integer, got {value!r}")
        if value <= 0:
            raise InvalidDimensions(f"{name} must be >= 1, got {value}")
    return int(pick_count), int(hook_count)


def _coerce_state(value) -> HookState:
    if isinstance(value, HookState):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise MalformedPattern(f"Not a hook state: {value!r}")
    try:
        return HookState(int(value))
    except ValueError:
        raise MalformedPattern(f"Not a hook state: {value!r}") from None


class PatternMatrix:
    """
    Hook state grid with bounds-checked access.

    Cells can only be mutated when the matrix is editable: CUSTOM matrices
    are editable from birth, others only after `mark_editable()`.
    """

    def __init__(
        self,
        cells: np.ndarray,
        family: WeaveFamily = WeaveFamily.CUSTOM,
        editable: bool | None = None,
    ):
        """
        Wrap an existing code array.

        Args:
            cells: 2D integer array of legacy codes, shape (picks, hooks)
            family: Family the content came from
            editable: Defaults to True for CUSTOM, False otherwise
        """
        cells = np.asarray(cells)
        if cells.ndim != 2:
            raise MalformedPattern(f"Pattern must be 2D, got {cells.ndim}D")
        check_dimensions(*cells.shape)
        if not np.isin(cells, list(LEGACY_CODES)).all():
            raise MalformedPattern("Pattern contains values other than 1, -1, 0")

        self._cells = cells.astype(np.int8, copy=True)
        self.family = WeaveFamily.parse(family)
        self.editable = self.family is WeaveFamily.CUSTOM if editable is None else editable

    # ═══════════════════════════════════════════════════════════════
    # CONSTRUCTION
    # ═══════════════════════════════════════════════════════════════

    @classmethod
    def blank(
        cls,
        pick_count: int,
        hook_count: int,
        family: WeaveFamily = WeaveFamily.CUSTOM,
        fill: HookState = HookState.NEUTRAL,
    ) -> PatternMatrix:
        """Create a matrix with every cell set to `fill`."""
        pick_count, hook_count = check_dimensions(pick_count, hook_count)
        fill = _coerce_state(fill)
        return cls(np.full((pick_count, hook_count), int(fill), dtype=np.int8), family)

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[int]],
        family: WeaveFamily = WeaveFamily.CUSTOM,
        editable: bool | None = None,
    ) -> PatternMatrix:
        """
        Build a matrix from rows of legacy codes or HookStates.

        Rows must be rectangular and contain only 1, -1 or 0. Anything looser
        belongs in the import normalizer.
        """
        if not rows:
            raise MalformedPattern("Pattern has no picks")
        width = len(rows[0])
        if width == 0:
            raise MalformedPattern("Pattern has no hooks")
        codes = []
        for i, row in enumerate(rows):
            if len(row) != width:
                raise MalformedPattern(
                    f"Pick {i} has {len(row)} hooks, expected {width}"
                )
            codes.append([int(_coerce_state(v)) for v in row])
        return cls(np.array(codes, dtype=np.int8).reshape(len(rows), width), family, editable)

    def copy(self) -> PatternMatrix:
        return PatternMatrix(self._cells, self.family, self.editable)

    # ═══════════════════════════════════════════════════════════════
    # SHAPE
    # ═══════════════════════════════════════════════════════════════

    @property
    def pick_count(self) -> int:
        return self._cells.shape[0]

    @property
    def hook_count(self) -> int:
        return self._cells.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        """Return (pick_count, hook_count)."""
        return self.pick_count, self.hook_count

    @property
    def codes(self) -> np.ndarray:
        """Read-only view of the legacy code array."""
        view = self._cells.view()
        view.flags.writeable = False
        return view

    def _check_index(self, pick: int, hook: int):
        if not (0 <= pick < self.pick_count and 0 <= hook < self.hook_count):
            raise OutOfBounds(
                f"Cell ({pick}, {hook}) outside {self.pick_count}x{self.hook_count} pattern"
            )

    # ═══════════════════════════════════════════════════════════════
    # CELL ACCESS
    # ═══════════════════════════════════════════════════════════════

    def get(self, pick: int, hook: int) -> HookState:
        """Return the state of one cell."""
        self._check_index(pick, hook)
        return HookState(int(self._cells[pick, hook]))

    def set(self, pick: int, hook: int, value: HookState) -> None:
        """Write a state verbatim, without cycling."""
        self._check_editable()
        self._check_index(pick, hook)
        self._cells[pick, hook] = int(_coerce_state(value))

    def toggle(self, pick: int, hook: int) -> HookState:
        """Advance one cell along Up -> Down -> Neutral and return the new state."""
        self._check_editable()
        new_state = cycle(self.get(pick, hook))
        self._cells[pick, hook] = int(new_state)
        return new_state

    def _check_editable(self):
        if not self.editable:
            raise EditNotPermitted(
                f"{self.family.info.display_name} pattern is generated and cannot be edited"
            )

    def mark_editable(self) -> None:
        """Allow cell edits on this matrix."""
        self.editable = True

    def row(self, pick: int) -> list[HookState]:
        """States of every hook on one pick."""
        if not 0 <= pick < self.pick_count:
            raise OutOfBounds(f"Pick {pick} outside [0, {self.pick_count})")
        return [HookState(int(v)) for v in self._cells[pick]]

    def iter_picks(self) -> Iterator[list[HookState]]:
        for pick in range(self.pick_count):
            yield self.row(pick)

    def count(self, state: HookState) -> int:
        """Number of cells in a given state."""
        return int(np.count_nonzero(self._cells == int(state)))

    # ═══════════════════════════════════════════════════════════════
    # RESHAPING AND EXPORT
    # ═══════════════════════════════════════════════════════════════

    def resize(
        self,
        new_pick_count: int,
        new_hook_count: int,
        fill: HookState = HookState.NEUTRAL,
    ) -> PatternMatrix:
        """
        Return a new matrix with different dimensions.

        Cells in the overlapping region are copied, new cells get `fill`.
        The original instance is not modified.
        """
        new_pick_count, new_hook_count = check_dimensions(new_pick_count, new_hook_count)
        fill = _coerce_state(fill)

        cells = np.full((new_pick_count, new_hook_count), int(fill), dtype=np.int8)
        p = min(self.pick_count, new_pick_count)
        h = min(self.hook_count, new_hook_count)
        cells[:p, :h] = self._cells[:p, :h]
        return PatternMatrix(cells, self.family, self.editable)

    def serialize_rows(self) -> list[list[int]]:
        """Project cells back to legacy integer codes."""
        return self._cells.astype(int).tolist()

    def to_text(self) -> str:
        """Multi-line glyph dump, one pick per line."""
        return "\n".join(
            "".join(state.symbol for state in row) for row in self.iter_picks()
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, PatternMatrix):
            return NotImplemented
        return (
            self.family is other.family
            and self.shape == other.shape
            and bool(np.array_equal(self._cells, other._cells))
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"PatternMatrix(family={self.family.value!r}, "
            f"picks={self.pick_count}, hooks={self.hook_count}, editable={self.editable})"
        )


def cells_equal(a: PatternMatrix, b: PatternMatrix) -> bool:
    """Compare content only, ignoring family and editability."""
    return a.shape == b.shape and bool(np.array_equal(a.codes, b.codes))
