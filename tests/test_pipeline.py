"""
Pipeline Tests
==============

End-to-end tests of the main loop with in-memory sources and sinks.
"""

from fractions import Fraction
from pathlib import Path

import numpy as np
import pytest

from conftest import ListFrameSource, RecordingSink, solid_frame


def make_pipeline(frames, slack_frames, sink=None, splash=None, border=5, **source_kwargs):
    from ebb.compare.differ import FrameDiffer
    from ebb.output.sequencer import OutputSequencer
    from ebb.pipeline import ExcisePipeline

    source = ListFrameSource(frames, **source_kwargs)
    sink = sink if sink is not None else RecordingSink()
    pipeline = ExcisePipeline(
        source=source,
        sequencer=OutputSequencer("out/frame", sink),
        differ=FrameDiffer(border=border),
        slack_frames=slack_frames,
        splash=splash,
    )
    return pipeline, source, sink


@pytest.fixture
def pause_then_pause_frames():
    """Frames 0-2 identical, frame 3 different, frames 4-9 identical to 3."""
    a = solid_frame(10)
    b = solid_frame(220)
    return [a, a, a, b, b, b, b, b, b, b]


class TestExcisePipeline:
    """Tests for the retain / repeat / drop main loop."""

    def test_ten_frame_scenario(self, pause_then_pause_frames):
        from ebb.engine.accumulator import SkipRange

        pipeline, _, sink = make_pipeline(pause_then_pause_frames, slack_frames=3)
        result = pipeline.run()

        assert result.frames_read == 10
        assert result.frames_emitted == 7
        assert result.frames_dropped == 3
        assert result.skip_ranges == [SkipRange(first=7, last=9)]
        assert not result.truncated

        assert sink.paths == [Path(f"out/frame{i:08d}.png") for i in range(7)]
        values = [int(sink.written[p][0, 0, 0]) for p in sink.paths]
        assert values == [10, 10, 10, 220, 220, 220, 220]

    def test_zero_slack_keeps_only_changes(self, pause_then_pause_frames):
        pipeline, _, sink = make_pipeline(pause_then_pause_frames, slack_frames=0)
        result = pipeline.run()

        assert result.frames_emitted == 2
        assert [(r.first, r.last) for r in result.skip_ranges] == [(1, 2), (4, 9)]
        values = [int(sink.written[p][0, 0, 0]) for p in sink.paths]
        assert values == [10, 220]

    def test_large_slack_keeps_everything(self, pause_then_pause_frames):
        pipeline, _, _ = make_pipeline(pause_then_pause_frames, slack_frames=100)
        result = pipeline.run()

        assert result.frames_emitted == 10
        assert result.skip_ranges == []

    def test_only_two_buffers_are_used(self, pause_then_pause_frames):
        frames = pause_then_pause_frames + [solid_frame(90), solid_frame(160)]
        pipeline, source, _ = make_pipeline(frames, slack_frames=1)
        pipeline.run()

        assert len(set(source.targets)) == 2

    def test_repeats_write_the_retained_frame(self):
        base = solid_frame(50)
        noisy = base.copy()
        noisy[12, 12] = 255  # single pixel, below the block rule

        pipeline, _, sink = make_pipeline([base, noisy, noisy], slack_frames=5)
        pipeline.run()

        for path in sink.paths:
            np.testing.assert_array_equal(sink.written[path], base)

    def test_decode_failure_keeps_partial_output(self, pause_then_pause_frames):
        pipeline, _, sink = make_pipeline(
            pause_then_pause_frames, slack_frames=3, fail_at=5
        )
        result = pipeline.run()

        assert result.truncated
        assert "frame 5" in result.stop_reason
        assert result.frames_read == 5
        assert result.frames_emitted == 5
        assert len(sink.paths) == 5

    def test_decode_failure_closes_open_span(self, pause_then_pause_frames):
        pipeline, _, _ = make_pipeline(
            pause_then_pause_frames, slack_frames=1, fail_at=8
        )
        result = pipeline.run()

        assert [(r.first, r.last) for r in result.skip_ranges] == [(2, 2), (5, 7)]

    def test_degenerate_border_treats_all_as_same(self, pause_then_pause_frames):
        pipeline, _, _ = make_pipeline(pause_then_pause_frames, slack_frames=0, border=50)
        result = pipeline.run()

        assert result.frames_emitted == 1
        assert [(r.first, r.last) for r in result.skip_ranges] == [(1, 9)]

    def test_empty_source(self):
        from ebb.output.sequencer import OutputSequencer
        from ebb.pipeline import ExcisePipeline

        source = ListFrameSource([solid_frame(0)])
        source._frames = []
        result = ExcisePipeline(source, OutputSequencer("f", RecordingSink())).run()

        assert result.frames_read == 0
        assert result.frames_emitted == 0
        assert result.skip_ranges == []

    def test_splash_precedes_main_output(self, pause_then_pause_frames, splash_file):
        from ebb.engine.splash import SplashInjector

        splash = SplashInjector(splash_file, duration_cs=20)
        pipeline, _, sink = make_pipeline(
            pause_then_pause_frames, slack_frames=3, splash=splash
        )
        result = pipeline.run()

        assert result.splash_frames == 5
        assert result.total_output == 12
        assert sorted(sink.duplicated) == [Path(f"out/frame{i:08d}.png") for i in range(5)]
        assert min(sink.written) == Path("out/frame00000005.png")

    def test_missing_splash_does_not_stop_run(self, pause_then_pause_frames, tmp_path):
        from ebb.engine.splash import SplashInjector

        splash = SplashInjector(tmp_path / "missing.png", duration_cs=300)
        pipeline, _, sink = make_pipeline(
            pause_then_pause_frames, slack_frames=3, splash=splash
        )
        result = pipeline.run()

        assert result.splash_frames == 0
        assert result.frames_emitted == 7
        assert sink.duplicated == {}
        assert sink.paths == [Path(f"out/frame{i:08d}.png") for i in range(7)]

    def test_write_failure_is_fatal(self, pause_then_pause_frames):
        from ebb.output.sink import ImageWriteError

        class FailingSink(RecordingSink):
            def write(self, path, frame):
                if len(self.written) == 2:
                    raise ImageWriteError(f"Failed to write {path}")
                super().write(path, frame)

        pipeline, _, _ = make_pipeline(
            pause_then_pause_frames, slack_frames=3, sink=FailingSink()
        )
        with pytest.raises(ImageWriteError):
            pipeline.run()

    def test_summary_reports_total_output(self, pause_then_pause_frames, caplog):
        from ebb.config import RESULT

        pipeline, _, _ = make_pipeline(pause_then_pause_frames, slack_frames=3)
        with caplog.at_level(RESULT):
            pipeline.run()

        messages = [r.getMessage() for r in caplog.records if r.levelno == RESULT]
        assert messages == ["Frames 10 --> 7 (00:00:00 --> 00:00:00)"]

    def test_result_to_dict(self, pause_then_pause_frames):
        pipeline, _, _ = make_pipeline(pause_then_pause_frames, slack_frames=3)
        data = pipeline.run().to_dict()

        assert data["frames_dropped"] == 3
        assert data["skip_ranges"] == [[7, 9]]


class TestFromSettings:
    """Tests for building a pipeline from configuration."""

    def test_slack_converted_at_source_rate(self, pause_then_pause_frames):
        from ebb.config import Settings
        from ebb.output.sequencer import OutputSequencer
        from ebb.pipeline import ExcisePipeline

        settings = Settings.model_validate(
            {"timing": {"slack_cs": 12}, "comparison": {"border": 2}}
        )
        source = ListFrameSource(pause_then_pause_frames, frame_rate=Fraction(25, 1))
        pipeline = ExcisePipeline.from_settings(
            source, OutputSequencer("f", RecordingSink()), settings
        )

        assert pipeline.slack_frames == 3
        assert pipeline.differ.border == 2
        assert pipeline.splash is None
        assert pipeline.run().frames_emitted == 7

    def test_splash_configured_by_path(self, splash_file):
        from ebb.config import Settings
        from ebb.output.sequencer import OutputSequencer
        from ebb.pipeline import ExcisePipeline

        settings = Settings.model_validate(
            {"splash": {"path": str(splash_file), "duration_cs": 100}}
        )
        source = ListFrameSource([solid_frame(0)])
        pipeline = ExcisePipeline.from_settings(
            source, OutputSequencer("f", RecordingSink()), settings
        )

        assert pipeline.splash is not None
        assert pipeline.splash.frame_count(Fraction(25, 1)) == 25
