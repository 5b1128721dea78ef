"""
AnalysisResult: what the external vision service says about a fabric photo.

The record is descriptive. Its candidate matrix (hook_pattern) is kept raw
and untrusted here; only the import normalizer turns it into a pattern.

Also home to the response parsing helpers: the service is asked for bare
JSON but often wraps it in markdown fences anyway.
"""

from __future__ import annotations
import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from loomhook.errors import AnalysisFailed


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class AnalysisResult:
    """Parsed analysis response."""

    pattern_type: str  # Free-form label, not necessarily a WeaveFamily
    description: str
    confidence: Confidence
    repeat_width: int | None = None  # Descriptive only, never used to resize
    repeat_height: int | None = None
    hook_pattern: Any = None  # Raw candidate matrix

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AnalysisResult:
        """
        Build from the camelCase JSON object returned by the service.

        Raises:
            AnalysisFailed: if a field has the wrong type
        """
        if not isinstance(data, Mapping):
            raise AnalysisFailed(f"Analysis must be a JSON object, got {type(data).__name__}")

        confidence = data.get("confidence")
        if confidence is None:
            confidence = Confidence.LOW.value
        try:
            confidence = Confidence(str(confidence).strip().lower())
        except ValueError:
            raise AnalysisFailed(f"Unknown confidence level: {confidence!r}") from None

        return cls(
            pattern_type=_text(data, "patternType", default="unknown"),
            description=_text(data, "description", default=""),
            confidence=confidence,
            repeat_width=_repeat(data, "repeatWidth"),
            repeat_height=_repeat(data, "repeatHeight"),
            hook_pattern=data.get("hookPattern"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Inverse of from_dict, for export documents."""
        return {
            "patternType": self.pattern_type,
            "description": self.description,
            "repeatWidth": self.repeat_width,
            "repeatHeight": self.repeat_height,
            "hookPattern": self.hook_pattern,
            "confidence": self.confidence.value,
        }


def _text(data: Mapping[str, Any], key: str, default: str) -> str:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise AnalysisFailed(f"{key} must be a string, got {type(value).__name__}")
    return value


def _repeat(data: Mapping[str, Any], key: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise AnalysisFailed(f"{key} must be a positive integer, got {value!r}")
    return value


_FENCED_BLOCK = re.compile(r"```(?:json)?[ \t]*\n?(.*?)(?:```|\Z)", re.IGNORECASE | re.DOTALL)


def strip_code_fences(text: str) -> str:
    """
    Return the body of the first markdown code fence (``` or ```json).

    Prose around the fence is dropped. Unfenced text is only stripped of
    surrounding whitespace.
    """
    match = _FENCED_BLOCK.search(text)
    if match is None:
        return text.strip()
    return match.group(1).strip()


def parse_analysis_text(text: str) -> AnalysisResult:
    """
    Parse the service's text reply into an AnalysisResult.

    Raises:
        AnalysisFailed: if the reply is not a JSON object after fence stripping
    """
    cleaned = strip_code_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise AnalysisFailed(f"Analysis reply is not valid JSON: {exc.msg}") from exc
    return AnalysisResult.from_dict(data)
