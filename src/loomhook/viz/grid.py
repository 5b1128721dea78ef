"""
Static previews of a pattern.

- Hook chain: every cell colored by state, playback pick highlighted
- Fabric preview: dark where the warp is on top, light elsewhere

Both return (fig, ax) like any other matplotlib helper; nothing is shown
or saved unless the caller asks for it.
"""

from __future__ import annotations
from pathlib import Path
from typing import TYPE_CHECKING

import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.colors import BoundaryNorm, ListedColormap
from matplotlib.figure import Figure
from matplotlib.patches import Patch, Rectangle

from loomhook.core.hooks import HookState

if TYPE_CHECKING:
    from loomhook.core.matrix import PatternMatrix


# Colors match the hook chain legend: Up blue, Down red, Neutral gray
HOOK_COLORS = {
    HookState.DOWN: "#ef4444",
    HookState.NEUTRAL: "#9ca3af",
    HookState.UP: "#3b82f6",
}
CMAP_HOOKS = ListedColormap([HOOK_COLORS[s] for s in (HookState.DOWN, HookState.NEUTRAL, HookState.UP)])
NORM_HOOKS = BoundaryNorm([-1.5, -0.5, 0.5, 1.5], CMAP_HOOKS.N)

WARP_ON_TOP = "#334155"
WEFT_ON_TOP = "#e2e8f0"
CMAP_FABRIC = ListedColormap([WEFT_ON_TOP, WARP_ON_TOP])


def _axes(ax: Axes | None, matrix: "PatternMatrix", cell_inches: float) -> tuple[Figure, Axes]:
    if ax is not None:
        return ax.figure, ax
    figsize = (
        max(3.0, matrix.hook_count * cell_inches),
        max(3.0, matrix.pick_count * cell_inches),
    )
    return plt.subplots(figsize=figsize)


def _label_grid(ax: Axes, matrix: "PatternMatrix"):
    ax.set_xticks(range(matrix.hook_count))
    ax.set_xticklabels([f"H{i + 1}" for i in range(matrix.hook_count)], fontsize=7)
    ax.set_yticks(range(matrix.pick_count))
    ax.set_yticklabels([str(i + 1) for i in range(matrix.pick_count)], fontsize=7)
    ax.set_xlabel("Hook")
    ax.set_ylabel("Pick #")


def plot_hook_chain(
    matrix: "PatternMatrix",
    current_pick: int | None = None,
    title: str = "Hook Chain Pattern",
    ax: Axes | None = None,
    legend: bool = True,
    cell_inches: float = 0.35,
) -> tuple[Figure, Axes]:
    """
    Plot every cell of the pattern colored by hook state.

    Args:
        matrix: Pattern to draw
        current_pick: Pick to outline (e.g. the playback cursor)
        title: Plot title
        ax: Existing axes to plot on (creates new figure if None)
        legend: Whether to add the Up/Down/Neutral legend
        cell_inches: Figure inches per cell if creating a new figure

    Returns:
        (fig, ax) tuple
    """
    fig, ax = _axes(ax, matrix, cell_inches)

    ax.imshow(matrix.codes, cmap=CMAP_HOOKS, norm=NORM_HOOKS, aspect="equal")
    _label_grid(ax, matrix)

    if current_pick is not None and 0 <= current_pick < matrix.pick_count:
        ax.add_patch(
            Rectangle(
                (-0.5, current_pick - 0.5),
                matrix.hook_count,
                1,
                fill=False,
                edgecolor="#eab308",
                linewidth=2.5,
            )
        )

    if legend:
        handles = [
            Patch(color=HOOK_COLORS[HookState.UP], label="Hook Up (warp raised)"),
            Patch(color=HOOK_COLORS[HookState.DOWN], label="Hook Down (warp lowered)"),
            Patch(color=HOOK_COLORS[HookState.NEUTRAL], label="Neutral"),
        ]
        ax.legend(handles=handles, loc="upper left", bbox_to_anchor=(1.02, 1), fontsize=8)

    ax.set_title(title)
    return fig, ax


def plot_fabric_preview(
    matrix: "PatternMatrix",
    title: str = "Fabric Structure Preview",
    ax: Axes | None = None,
    cell_inches: float = 0.25,
) -> tuple[Figure, Axes]:
    """Plot the fabric face: warp on top where the hook is Up."""
    fig, ax = _axes(ax, matrix, cell_inches)

    warp_on_top = (matrix.codes == int(HookState.UP)).astype(float)
    ax.imshow(warp_on_top, cmap=CMAP_FABRIC, vmin=0, vmax=1, aspect="equal")
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_title(title)
    return fig, ax


def plot_pattern_summary(
    matrix: "PatternMatrix",
    current_pick: int | None = None,
    figsize: tuple[float, float] = (14, 6),
) -> Figure:
    """Hook chain and fabric preview side by side."""
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=figsize)
    plot_hook_chain(matrix, current_pick=current_pick, ax=ax1, legend=False)
    plot_fabric_preview(matrix, ax=ax2)
    fig.suptitle(f"{matrix.family.info.display_name}: {matrix.pick_count} picks x {matrix.hook_count} hooks")
    fig.tight_layout()
    return fig


def save_figure(fig: Figure, path: str | Path, dpi: int = 150, **kwargs) -> None:
    """Save figure to file."""
    fig.savefig(path, dpi=dpi, bbox_inches="tight", **kwargs)
