"""
Pytest configuration and shared fixtures.
"""

import matplotlib

matplotlib.use("Agg")

import pytest


@pytest.fixture
def mixed_custom_matrix():
    """4x5 custom matrix holding all three hook states."""
    from loomhook.core import PatternMatrix, WeaveFamily
    return PatternMatrix.from_rows(
        [
            [1, -1, 0, 1, -1],
            [0, 0, 1, -1, 1],
            [-1, 1, -1, 0, 0],
            [1, 1, 1, -1, 0],
        ],
        family=WeaveFamily.CUSTOM,
    )


@pytest.fixture
def analysis_payload():
    """Analysis object as the vision service returns it."""
    return {
        "patternType": "twill",
        "description": "Diagonal 2/2 twill",
        "repeatWidth": 4,
        "repeatHeight": 4,
        "hookPattern": [
            [1, 1, -1, -1],
            [-1, 1, 1, -1],
            [-1, -1, 1, 1],
            [1, -1, -1, 1],
        ],
        "confidence": "high",
    }
