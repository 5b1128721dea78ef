"""
Visualization utilities.

- Hook chain grid (state colors, playback pick highlighted)
- Fabric structure preview
"""

from loomhook.viz.grid import (
    plot_hook_chain,
    plot_fabric_preview,
    plot_pattern_summary,
    save_figure,
)

__all__ = [
    "plot_hook_chain",
    "plot_fabric_preview",
    "plot_pattern_summary",
    "save_figure",
]
