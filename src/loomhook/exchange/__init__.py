"""
Exchange layer: getting patterns into and out of the engine.

- normalize: external candidate matrix -> CUSTOM PatternMatrix (or MalformedPattern)
- PatternBundle / export_bundle / import_bundle: JSON export document
"""

from loomhook.exchange.normalizer import normalize
from loomhook.exchange.codec import (
    PatternBundle,
    export_bundle,
    import_bundle,
    dumps,
    loads,
    export_filename,
    save_bundle,
    load_bundle,
)

__all__ = [
    "normalize",
    "PatternBundle",
    "export_bundle",
    "import_bundle",
    "dumps",
    "loads",
    "export_filename",
    "save_bundle",
    "load_bundle",
]
