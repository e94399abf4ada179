"""
Tests for timestamp selection.
"""

import pytest

from vidlens.exceptions import ValidationException
from vidlens.models import FrameStrategy
from vidlens.video_pipeline.core.frame_selector import FrameSelector, compute_timestamps, uniform_timestamps


@pytest.mark.parametrize("duration", [0.5, 10.0, 61.3, 3600.0])
@pytest.mark.parametrize("max_frames", [1, 3, 7, 50])
def test_uniform_timestamps_are_interior_and_increasing(duration, max_frames):
    timestamps = compute_timestamps(duration, max_frames, "uniform")

    assert len(timestamps) == max_frames
    assert all(0 < t < duration for t in timestamps)
    assert all(a < b for a, b in zip(timestamps, timestamps[1:]))
    for i, t in enumerate(timestamps, start=1):
        assert t == pytest.approx(duration / (max_frames + 1) * i)


def test_uniform_ten_seconds_three_frames():
    assert compute_timestamps(10.0, 3) == pytest.approx([2.5, 5.0, 7.5])


@pytest.mark.parametrize("strategy", ["keyframe", "scene_change", FrameStrategy.KEYFRAME, FrameStrategy.SCENE_CHANGE])
def test_detection_strategies_fall_back_to_uniform(strategy):
    assert compute_timestamps(42.0, 6, strategy) == uniform_timestamps(42.0, 6)


@pytest.mark.parametrize("max_frames", [0, -1])
def test_non_positive_frame_count_rejected(max_frames):
    with pytest.raises(ValidationException):
        compute_timestamps(10.0, max_frames)


def test_unknown_strategy_rejected():
    with pytest.raises(ValidationException):
        compute_timestamps(10.0, 3, "motion")


@pytest.mark.parametrize("duration", [None, 0, -5])
def test_unknown_duration_uses_fallback(duration):
    selector = FrameSelector(fallback_duration=60.0)
    assert selector.select(duration, 5, "keyframe") == pytest.approx([10, 20, 30, 40, 50])


def test_large_request_is_accepted():
    assert len(FrameSelector(large_request_warning=10).select(100.0, 250)) == 250


def test_large_request_logs_warning(warnings_logged):
    FrameSelector(large_request_warning=10).select(100.0, 11)
    assert any("Large frame request: 11 frames" in m for m in warnings_logged)


def test_request_at_threshold_logs_nothing(warnings_logged):
    FrameSelector(large_request_warning=10).select(100.0, 10)
    assert warnings_logged == []


@pytest.mark.parametrize("strategy", ["keyframe", "scene_change"])
def test_detection_strategy_fallback_is_logged(strategy, warnings_logged):
    compute_timestamps(42.0, 3, strategy)
    assert any(f"Strategy '{strategy}'" in m and "uniform sampling" in m for m in warnings_logged)


def test_uniform_logs_no_fallback_warning(warnings_logged):
    compute_timestamps(42.0, 3, "uniform")
    assert not any("uniform sampling" in m for m in warnings_logged)
    assert warnings_logged == []


def test_unknown_duration_is_logged(warnings_logged):
    FrameSelector(fallback_duration=60.0).select(None, 2)
    assert any("assuming 60.0s" in m for m in warnings_logged)
