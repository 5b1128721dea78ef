"""
Pattern codec: the JSON export document.

Document layout:

    {
      "hooks": <int>,
      "picks": <int>,
      "pattern": <family value>,
      "hookPattern": [[1, -1, 0, ...], ...],
      "analysis": <analysis object> | null
    }

import_bundle(export_bundle(x)) reproduces the cells and family of x.
A missing or null analysis block imports as None; unknown keys are ignored.
"""

from __future__ import annotations
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from loomhook.analysis.result import AnalysisResult
from loomhook.core.families import WeaveFamily
from loomhook.core.matrix import PatternMatrix
from loomhook.errors import AnalysisFailed, MalformedPattern


@dataclass
class PatternBundle:
    """Everything that goes into an export: the matrix and its analysis."""

    matrix: PatternMatrix
    analysis: AnalysisResult | None = None

    @property
    def family(self) -> WeaveFamily:
        return self.matrix.family


def export_bundle(bundle: PatternBundle) -> dict[str, Any]:
    """Project a bundle onto the export document."""
    matrix = bundle.matrix
    return {
        "hooks": matrix.hook_count,
        "picks": matrix.pick_count,
        "pattern": matrix.family.value,
        "hookPattern": matrix.serialize_rows(),
        "analysis": bundle.analysis.to_dict() if bundle.analysis is not None else None,
    }


def _count(document: Mapping[str, Any], key: str, actual: int):
    value = document.get(key)
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedPattern(f"{key} must be an integer, got {value!r}")
    if value != actual:
        raise MalformedPattern(f"{key} is {value} but hookPattern has {actual}")


def import_bundle(document: Mapping[str, Any]) -> PatternBundle:
    """
    Rebuild a bundle from an export document.

    Raises:
        MalformedPattern: unknown family, invalid cells, or counts that
            disagree with the hookPattern shape
    """
    if not isinstance(document, Mapping):
        raise MalformedPattern(f"Document must be a JSON object, got {type(document).__name__}")

    try:
        family = WeaveFamily.parse(document.get("pattern", WeaveFamily.CUSTOM.value))
    except ValueError as exc:
        raise MalformedPattern(str(exc)) from exc

    rows = document.get("hookPattern")
    if not isinstance(rows, list) or not all(isinstance(row, list) for row in rows):
        raise MalformedPattern("hookPattern must be a list of rows")
    matrix = PatternMatrix.from_rows(rows, family=family)

    _count(document, "picks", matrix.pick_count)
    _count(document, "hooks", matrix.hook_count)

    analysis = document.get("analysis")
    if analysis is not None:
        try:
            analysis = AnalysisResult.from_dict(analysis)
        except AnalysisFailed as exc:
            raise MalformedPattern(f"Invalid analysis block: {exc}") from exc

    return PatternBundle(matrix=matrix, analysis=analysis)


def dumps(bundle: PatternBundle) -> str:
    return json.dumps(export_bundle(bundle), indent=2)


def loads(text: str) -> PatternBundle:
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedPattern(f"Document is not valid JSON: {exc.msg}") from exc
    return import_bundle(document)


def export_filename(family: WeaveFamily, when: datetime | None = None) -> str:
    """File name for an export: loom-pattern-<family>-<epoch ms>.json"""
    when = when or datetime.now(timezone.utc)
    millis = int(when.timestamp() * 1000)
    return f"loom-pattern-{WeaveFamily.parse(family).value}-{millis}.json"


def save_bundle(bundle: PatternBundle, path: str | Path) -> Path:
    """Write a bundle to disk. A directory path gets a generated file name."""
    path = Path(path)
    if path.is_dir():
        path = path / export_filename(bundle.family)
    path.write_text(dumps(bundle), encoding="utf-8")
    return path


def load_bundle(path: str | Path) -> PatternBundle:
    return loads(Path(path).read_text(encoding="utf-8"))
