"""
loomhook: Hook-pattern engine for a Jacquard-style loom

Generates, edits, plays back, imports and exports the hook state matrix
that drives a weave: which warp hooks are raised or lowered on each pick.

Core concepts:
- A cell is Up, Down or Neutral
- A pick (row) is one weft insertion; a hook (column) is one warp thread
- Named weave families are closed-form periodic rules
- External (AI-derived) matrices are normalized before they are trusted
"""

__version__ = "0.1.0"
