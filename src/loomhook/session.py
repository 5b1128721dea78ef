"""
LoomSession: the single context that owns a pattern and its playback.

The session holds:
- The current PatternMatrix (single source of truth for content)
- The AnalysisResult it was imported from, if any
- The PlaybackScheduler walking its picks
- At most one pending analysis request

Every replacement of the matrix goes through one place, which also stops and
rewinds playback. A failed operation raises before anything is assigned, so
the previous state is kept.
"""

from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from loomhook.analysis.client import AnalysisService
from loomhook.analysis.result import AnalysisResult
from loomhook.core.families import WeaveFamily
from loomhook.core.generator import generate
from loomhook.core.hooks import HookState
from loomhook.core.matrix import PatternMatrix
from loomhook.core.playback import PlaybackConfig, PlaybackScheduler
from loomhook.errors import AnalysisFailed
from loomhook.exchange import codec
from loomhook.exchange.normalizer import normalize

logger = logging.getLogger(__name__)


@dataclass
class SessionConfig:
    """Initial pattern and playback settings."""

    family: WeaveFamily = WeaveFamily.PLAIN
    pick_count: int = 12
    hook_count: int = 16
    playback: PlaybackConfig = field(default_factory=PlaybackConfig)


class LoomSession:
    """Owner of the current pattern, its analysis and its playback cursor."""

    def __init__(
        self,
        config: SessionConfig | None = None,
        analysis_service: AnalysisService | None = None,
    ):
        self.config = config or SessionConfig()
        self.analysis_service = analysis_service

        self._matrix = generate(
            self.config.family, self.config.pick_count, self.config.hook_count
        )
        self._analysis: AnalysisResult | None = None
        self.playback = PlaybackScheduler(
            pick_count=self._matrix.pick_count, config=self.config.playback
        )

        self._analysis_task: asyncio.Future | None = None
        self._discarded: asyncio.Future | None = None

    # ═══════════════════════════════════════════════════════════════
    # STATE
    # ═══════════════════════════════════════════════════════════════

    @property
    def matrix(self) -> PatternMatrix:
        return self._matrix

    @property
    def family(self) -> WeaveFamily:
        return self._matrix.family

    @property
    def analysis(self) -> AnalysisResult | None:
        return self._analysis

    @property
    def custom_mode(self) -> bool:
        return self._matrix.editable

    @property
    def current_pick(self) -> int:
        return self.playback.current_pick

    def current_row(self) -> list[HookState]:
        """Hook states on the pick under the playback cursor."""
        return self._matrix.row(self.playback.current_pick)

    def _install(self, matrix: PatternMatrix, analysis: AnalysisResult | None) -> PatternMatrix:
        self._matrix = matrix
        self._analysis = analysis
        self.playback.on_matrix_replaced(matrix.pick_count)
        logger.info(
            "Installed %s pattern: %d picks x %d hooks",
            matrix.family.value, matrix.pick_count, matrix.hook_count,
        )
        return matrix

    # ═══════════════════════════════════════════════════════════════
    # GENERATION AND EDITING
    # ═══════════════════════════════════════════════════════════════

    def select_family(self, family: WeaveFamily | str) -> PatternMatrix:
        """Regenerate at the current dimensions with another family."""
        family = WeaveFamily.parse(family)
        matrix = generate(family, self._matrix.pick_count, self._matrix.hook_count)
        return self._install(matrix, None)

    def set_dimensions(self, pick_count: int, hook_count: int) -> PatternMatrix:
        """
        Change the pattern size.

        Generated families are re-derived at the new size. Editable patterns
        keep their overlapping cells and get Neutral in new ones.
        """
        if self._matrix.editable:
            matrix = self._matrix.resize(pick_count, hook_count, HookState.NEUTRAL)
        else:
            matrix = generate(self._matrix.family, pick_count, hook_count)
        return self._install(matrix, self._analysis)

    def toggle_cell(self, pick: int, hook: int) -> HookState:
        return self._matrix.toggle(pick, hook)

    def set_cell(self, pick: int, hook: int, value: HookState) -> None:
        self._matrix.set(pick, hook, value)

    def reset(self) -> None:
        """
        Stop playback at pick 0 and drop the analysis.

        An editable pattern is also cleared to all Neutral.
        """
        self.playback.reset()
        self._analysis = None
        if self._matrix.editable:
            self._install(
                PatternMatrix.blank(self._matrix.pick_count, self._matrix.hook_count),
                None,
            )

    # ═══════════════════════════════════════════════════════════════
    # IMPORT / EXPORT
    # ═══════════════════════════════════════════════════════════════

    def apply_analysis(self, result: AnalysisResult) -> PatternMatrix:
        """Normalize an analysis result and install its pattern."""
        matrix = normalize(result)
        return self._install(matrix, result)

    def export_document(self) -> dict[str, Any]:
        return codec.export_bundle(codec.PatternBundle(self._matrix, self._analysis))

    def export_json(self) -> str:
        return codec.dumps(codec.PatternBundle(self._matrix, self._analysis))

    def export_filename(self, when: datetime | None = None) -> str:
        return codec.export_filename(self.family, when)

    def load_document(self, document: Mapping[str, Any] | str) -> PatternMatrix:
        """Install a pattern from an export document or its JSON text."""
        if isinstance(document, str):
            bundle = codec.loads(document)
        else:
            bundle = codec.import_bundle(document)
        return self._install(bundle.matrix, bundle.analysis)

    # ═══════════════════════════════════════════════════════════════
    # ANALYSIS
    # ═══════════════════════════════════════════════════════════════

    @property
    def is_analyzing(self) -> bool:
        return self._analysis_task is not None and not self._analysis_task.done()

    async def analyze_image(self, image: Any) -> PatternMatrix | None:
        """
        Send an image to the analysis service and install the result.

        While the request is pending the current pattern stays in place.

        Returns:
            The installed matrix, or None if the request was cancelled
            through cancel_analysis()

        Raises:
            AnalysisFailed: service failure, or a request already pending
            MalformedPattern: the returned candidate matrix is unusable
        """
        if self.analysis_service is None:
            raise AnalysisFailed("No analysis service configured")
        if self.is_analyzing:
            raise AnalysisFailed("An analysis request is already pending")

        task = asyncio.ensure_future(self.analysis_service.submit(image))
        self._analysis_task = task
        try:
            result = await task
        except asyncio.CancelledError:
            if self._discarded is task:
                logger.info("Analysis request cancelled; result discarded")
                return None
            raise
        except AnalysisFailed:
            logger.error("Image analysis failed; keeping current pattern", exc_info=True)
            raise
        finally:
            # A newer request may already own these slots
            if self._analysis_task is task:
                self._analysis_task = None
            if self._discarded is task:
                self._discarded = None

        return self.apply_analysis(result)

    def cancel_analysis(self) -> bool:
        """Cancel the pending analysis. Returns False if none was pending."""
        if not self.is_analyzing:
            return False
        self._discarded = self._analysis_task
        self._analysis_task.cancel()
        return True

    async def close(self) -> None:
        """Cancel pending work and stop the playback timer."""
        self.cancel_analysis()
        await self.playback.shutdown()
