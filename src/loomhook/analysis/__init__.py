"""
Analysis layer: the boundary to the external vision service.

IMPORTANT: Nothing here mutates engine state. Results flow into the engine
only through the import normalizer.

- AnalysisResult: descriptive record plus an untrusted candidate matrix
- AnalysisService: capability interface (async submit)
- AnthropicVisionClient: HTTP implementation of AnalysisService
- prepare_image: resize + JPEG + base64 for the request
"""

from loomhook.analysis.result import (
    AnalysisResult,
    Confidence,
    parse_analysis_text,
    strip_code_fences,
)
from loomhook.analysis.image import prepare_image, fit_within
from loomhook.analysis.client import (
    AnalysisService,
    AnalysisClientConfig,
    AnthropicVisionClient,
    build_analysis_prompt,
    extract_reply_text,
)

__all__ = [
    "AnalysisResult",
    "Confidence",
    "parse_analysis_text",
    "strip_code_fences",
    "prepare_image",
    "fit_within",
    "AnalysisService",
    "AnalysisClientConfig",
    "AnthropicVisionClient",
    "build_analysis_prompt",
    "extract_reply_text",
]
