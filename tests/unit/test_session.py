"""Unit tests for LoomSession."""

import asyncio

import pytest

from loomhook.analysis import AnalysisResult
from loomhook.core import HookState, WeaveFamily, generate
from loomhook.errors import AnalysisFailed, EditNotPermitted, InvalidDimensions, MalformedPattern
from loomhook.session import LoomSession, SessionConfig


class StubService:
    """Analysis service returning a fixed result after an optional delay."""

    def __init__(self, result=None, error=None, delay=0.0):
        self.result = result
        self.error = error
        self.delay = delay
        self.calls = 0

    async def submit(self, image):
        self.calls += 1
        await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def custom_session():
    return LoomSession(SessionConfig(family=WeaveFamily.CUSTOM, pick_count=4, hook_count=4))


class TestGeneration:
    """Tests for family selection and sizing."""

    def test_defaults(self):
        session = LoomSession()
        assert session.family is WeaveFamily.PLAIN
        assert session.matrix.shape == (12, 16)
        assert session.matrix == generate(WeaveFamily.PLAIN, 12, 16)
        assert not session.custom_mode
        assert session.analysis is None

    def test_select_family(self):
        session = LoomSession()
        session.select_family("satin")
        assert session.matrix == generate(WeaveFamily.SATIN, 12, 16)

    def test_select_family_resets_playback(self):
        session = LoomSession()
        session.playback.play()
        session.playback.advance(2000)
        session.select_family(WeaveFamily.TWILL)
        assert not session.playback.is_playing
        assert session.current_pick == 0

    def test_set_dimensions_regenerates(self):
        session = LoomSession()
        session.set_dimensions(6, 8)
        assert session.matrix == generate(WeaveFamily.PLAIN, 6, 8)
        assert session.playback.pick_count == 6

    def test_set_dimensions_keeps_custom_cells(self, custom_session):
        custom_session.toggle_cell(0, 0)
        custom_session.toggle_cell(3, 3)
        custom_session.set_dimensions(5, 2)
        assert custom_session.matrix.shape == (5, 2)
        assert custom_session.matrix.get(0, 0) is HookState.UP
        assert custom_session.matrix.get(4, 1) is HookState.NEUTRAL

    def test_invalid_dimensions_keep_state(self):
        session = LoomSession()
        before = session.matrix
        with pytest.raises(InvalidDimensions):
            session.set_dimensions(0, 4)
        assert session.matrix is before

    def test_playback_follows_rows(self):
        session = LoomSession(SessionConfig(pick_count=4, hook_count=4))
        session.playback.play()
        session.playback.advance(500)
        assert session.current_row() == session.matrix.row(1)


class TestEditing:
    """Tests for custom-mode editing."""

    def test_toggle_in_custom_mode(self, custom_session):
        assert custom_session.toggle_cell(1, 2) is HookState.UP
        assert custom_session.toggle_cell(1, 2) is HookState.DOWN

    def test_set_cell(self, custom_session):
        custom_session.set_cell(0, 3, HookState.DOWN)
        assert custom_session.matrix.get(0, 3) is HookState.DOWN

    def test_generated_mode_refuses_edits(self):
        session = LoomSession()
        with pytest.raises(EditNotPermitted):
            session.toggle_cell(0, 0)

    def test_reset_clears_custom_grid(self, custom_session):
        custom_session.toggle_cell(0, 0)
        custom_session.playback.play()
        custom_session.playback.advance(1000)
        custom_session.reset()
        assert custom_session.matrix.count(HookState.NEUTRAL) == 16
        assert custom_session.current_pick == 0
        assert not custom_session.playback.is_playing

    def test_reset_keeps_generated_grid(self):
        session = LoomSession()
        before = session.matrix
        session.reset()
        assert session.matrix is before


class TestImportExport:
    """Tests for analysis application and documents."""

    def test_apply_analysis(self, analysis_payload):
        session = LoomSession()
        result = AnalysisResult.from_dict(analysis_payload)
        matrix = session.apply_analysis(result)
        assert session.matrix is matrix
        assert session.family is WeaveFamily.CUSTOM
        assert session.custom_mode
        assert session.analysis == result
        assert session.matrix.shape == (4, 4)

    def test_ragged_analysis_keeps_previous(self, analysis_payload):
        session = LoomSession()
        session.playback.play()
        session.playback.advance(1500)
        before = session.matrix
        analysis_payload["hookPattern"] = [[1, -1, 1, -1], [1, -1, 1, -1], [1, -1, 1]]
        with pytest.raises(MalformedPattern):
            session.apply_analysis(AnalysisResult.from_dict(analysis_payload))
        assert session.matrix is before
        assert session.matrix == generate(WeaveFamily.PLAIN, 12, 16)
        assert session.analysis is None
        assert session.playback.is_playing
        assert session.current_pick == 3

    def test_export_document(self):
        session = LoomSession(SessionConfig(family=WeaveFamily.BASKET, pick_count=2, hook_count=4))
        doc = session.export_document()
        assert doc["pattern"] == "basket"
        assert doc["picks"] == 2
        assert doc["hooks"] == 4
        assert doc["analysis"] is None

    def test_export_and_load_round_trip(self, analysis_payload):
        source = LoomSession()
        source.apply_analysis(AnalysisResult.from_dict(analysis_payload))
        source.toggle_cell(0, 0)
        text = source.export_json()

        target = LoomSession()
        target.load_document(text)
        assert target.matrix == source.matrix
        assert target.analysis == source.analysis

    def test_load_invalid_document_keeps_previous(self):
        session = LoomSession()
        before = session.matrix
        with pytest.raises(MalformedPattern):
            session.load_document({"pattern": "plain", "hookPattern": [[1, 9]]})
        assert session.matrix is before

    def test_export_filename(self):
        assert LoomSession().export_filename().startswith("loom-pattern-plain-")


class TestAnalyzeImage:
    """Tests for the asynchronous analysis flow."""

    def test_success_installs_pattern(self, analysis_payload):
        result = AnalysisResult.from_dict(analysis_payload)
        session = LoomSession(analysis_service=StubService(result=result))
        matrix = asyncio.run(session.analyze_image(b"image"))
        assert session.matrix is matrix
        assert session.analysis == result
        assert not session.is_analyzing

    def test_failure_keeps_previous(self):
        session = LoomSession(analysis_service=StubService(error=AnalysisFailed("bad reply")))
        before = session.matrix
        with pytest.raises(AnalysisFailed):
            asyncio.run(session.analyze_image(b"image"))
        assert session.matrix is before
        assert session.analysis is None
        assert not session.is_analyzing

    def test_no_service(self):
        with pytest.raises(AnalysisFailed):
            asyncio.run(LoomSession().analyze_image(b"image"))

    def test_matrix_unchanged_while_pending(self, analysis_payload):
        result = AnalysisResult.from_dict(analysis_payload)

        async def scenario():
            session = LoomSession(analysis_service=StubService(result=result, delay=0.05))
            before = session.matrix
            task = asyncio.create_task(session.analyze_image(b"image"))
            await asyncio.sleep(0.01)
            pending_matrix = session.matrix
            analyzing = session.is_analyzing
            await task
            return before, pending_matrix, analyzing, session

        before, pending_matrix, analyzing, session = asyncio.run(scenario())
        assert analyzing
        assert pending_matrix is before
        assert session.matrix is not before

    def test_second_request_rejected(self, analysis_payload):
        result = AnalysisResult.from_dict(analysis_payload)

        async def scenario():
            service = StubService(result=result, delay=0.05)
            session = LoomSession(analysis_service=service)
            first = asyncio.create_task(session.analyze_image(b"one"))
            await asyncio.sleep(0.01)
            with pytest.raises(AnalysisFailed):
                await session.analyze_image(b"two")
            await first
            return service

        service = asyncio.run(scenario())
        assert service.calls == 1

    def test_cancel_discards_result(self, analysis_payload):
        result = AnalysisResult.from_dict(analysis_payload)

        async def scenario():
            session = LoomSession(analysis_service=StubService(result=result, delay=1.0))
            before = session.matrix
            task = asyncio.create_task(session.analyze_image(b"image"))
            await asyncio.sleep(0.01)
            assert session.cancel_analysis()
            outcome = await task
            return session, before, outcome

        session, before, outcome = asyncio.run(scenario())
        assert outcome is None
        assert session.matrix is before
        assert session.analysis is None
        assert not session.is_analyzing
        assert not session.cancel_analysis()

    def test_close_stops_everything(self, analysis_payload):
        result = AnalysisResult.from_dict(analysis_payload)

        async def scenario():
            session = LoomSession(analysis_service=StubService(result=result, delay=1.0))
            session.playback.play()
            task = asyncio.create_task(session.analyze_image(b"image"))
            await asyncio.sleep(0.01)
            await session.close()
            outcome = await task
            return session, outcome

        session, outcome = asyncio.run(scenario())
        assert outcome is None
        assert not session.playback.is_playing
        assert not session.playback.timer_active

    def test_back_to_back_requests_keep_tracking(self, analysis_payload):
        result = AnalysisResult.from_dict(analysis_payload)

        class ScriptedService(StubService):
            """Each call sleeps for the next delay in the script."""

            def __init__(self, delays):
                super().__init__(result=result)
                self.delays = list(delays)
                self.second_started = asyncio.Event()

            async def submit(self, image):
                self.delay = self.delays[self.calls]
                if self.calls == 1:
                    self.second_started.set()
                return await super().submit(image)

        async def scenario():
            service = ScriptedService([0.01, 1.0])
            session = LoomSession(analysis_service=service)
            first = asyncio.create_task(session.analyze_image(b"a"))
            await asyncio.sleep(0)

            async def follow_up():
                while session.is_analyzing:
                    await asyncio.sleep(0)
                return await session.analyze_image(b"b")

            second = asyncio.create_task(follow_up())
            await first
            await service.second_started.wait()
            pending = session.is_analyzing
            with pytest.raises(AnalysisFailed):
                await session.analyze_image(b"c")
            cancelled = session.cancel_analysis()
            outcome = await second
            return session, service, pending, cancelled, outcome

        session, service, pending, cancelled, outcome = asyncio.run(scenario())
        assert pending
        assert cancelled
        assert outcome is None
        assert service.calls == 2
        assert not session.is_analyzing
