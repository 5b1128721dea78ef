"""
Error types raised by the engine.

All of them are recoverable: an operation that raises leaves the state it
was applied to untouched.
"""


class LoomError(Exception):
    """Base class for engine errors."""


class InvalidDimensions(LoomError, ValueError):
    """Pick or hook count is not a positive integer."""


class OutOfBounds(LoomError, IndexError):
    """Pick or hook index outside the matrix."""


class EditNotPermitted(LoomError):
    """Cell mutation on a matrix that is not editable."""


class MalformedPattern(LoomError, ValueError):
    """A candidate matrix or exchange document cannot be turned into a pattern."""


class AnalysisFailed(LoomError):
    """The external image analysis did not produce a usable result."""
