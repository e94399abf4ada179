"""
Tests for VideoProcessor workflows with a fake decoder and a fake client.
"""

import os

import pytest

from vidlens.exceptions import (
    ResourceNotFoundException,
    UpstreamApplicationException,
    UpstreamErrorKind,
    ValidationException,
    VidlensException,
)
from vidlens.models import TokenUsage
from vidlens.tests.conftest import FakeClient, FakeDecoder
from vidlens.utils.validation import ScriptOptions
from vidlens.video_pipeline.core.frame_extractor import FrameExtractor
from vidlens.video_pipeline.core.video_processor import VideoProcessor


@pytest.fixture
def output_dir(tmp_path):
    return str(tmp_path / "frames")


@pytest.fixture
def processor(fake_client, fake_decoder, output_dir):
    return VideoProcessor(client=fake_client, extractor=FrameExtractor(decoder=fake_decoder, output_dir=output_dir))


async def test_analyze_video_caps_frames_and_cleans_up(processor, fake_client, fake_decoder, video_file, output_dir):
    result = await processor.analyze_video(video_file, max_frames=10, strategy="uniform")

    (call,) = fake_client.calls
    assert call["op"] == "analyze_images_in_single_request"
    assert len(call["paths"]) == 4
    assert result.frame_count == 4
    assert result.timestamps == pytest.approx([2.0, 4.0, 6.0, 8.0])
    assert result.summary == "summary of 4 frames"
    assert result.usage == fake_client.vision_usage
    assert all(c["quality"] == 85 for c in fake_decoder.capture_calls)
    assert os.listdir(output_dir) == []


async def test_analyze_video_uses_custom_prompt(processor, fake_client, video_file):
    await processor.analyze_video(video_file, prompt="Count the dogs", max_frames=2)
    assert fake_client.calls[0]["prompt"] == "Count the dogs"


async def test_analyze_video_keeps_frames_without_cleanup(processor, video_file, output_dir):
    await processor.analyze_video(video_file, max_frames=2, cleanup=False)
    assert len(os.listdir(output_dir)) == 2


async def test_frames_removed_when_analysis_fails(fake_decoder, video_file, output_dir):
    client = FakeClient(
        single_request_error=UpstreamApplicationException(UpstreamErrorKind.RATE_LIMITED, "LimitExceeded", "slow down")
    )
    processor = VideoProcessor(client=client, extractor=FrameExtractor(decoder=fake_decoder, output_dir=output_dir))

    with pytest.raises(UpstreamApplicationException):
        await processor.analyze_video(video_file, max_frames=3)
    assert os.listdir(output_dir) == []


async def test_analyze_video_missing_file(processor, fake_client, tmp_path):
    with pytest.raises(ResourceNotFoundException):
        await processor.analyze_video(str(tmp_path / "gone.mp4"))
    assert fake_client.calls == []


@pytest.mark.parametrize("max_frames", [0, -3])
async def test_analyze_video_rejects_non_positive_frames(processor, video_file, max_frames):
    with pytest.raises(ValidationException):
        await processor.analyze_video(video_file, max_frames=max_frames)


async def test_analyze_video_requires_client(fake_decoder, video_file, output_dir):
    processor = VideoProcessor(extractor=FrameExtractor(decoder=fake_decoder, output_dir=output_dir))
    with pytest.raises(ValidationException):
        await processor.analyze_video(video_file)


async def test_get_video_info_needs_no_client(fake_decoder, video_file, output_dir):
    processor = VideoProcessor(extractor=FrameExtractor(decoder=fake_decoder, output_dir=output_dir))
    metadata = await processor.get_video_info(video_file)
    assert metadata.width == 1920


async def test_video_script_chains_two_calls_and_sums_usage(processor, fake_client, video_file):
    options = ScriptOptions(script_type="documentary", target_duration=45, prompt="Mention the river")
    result = await processor.generate_video_script(video_file, options)

    assert [call["op"] for call in fake_client.calls] == ["analyze_images_in_single_request", "generate_text"]
    script_prompt = fake_client.calls[1]["prompt"]
    assert "summary of 4 frames" in script_prompt
    assert "Script type: documentary" in script_prompt
    assert "Target duration: about 45 seconds" in script_prompt
    assert "Special requirements: Mention the river" in script_prompt

    assert result.analysis == "summary of 4 frames"
    assert result.script.startswith("## Video title")
    assert result.usage == fake_client.vision_usage + fake_client.text_usage
    assert result.usage.total_tokens == 150 + 500


async def test_image_script_checks_every_path_first(fake_client, image_factory, tmp_path):
    processor = VideoProcessor(client=fake_client)
    paths = [image_factory("a.jpg"), str(tmp_path / "x.jpg"), str(tmp_path / "y.jpg")]

    with pytest.raises(ResourceNotFoundException) as exc_info:
        await processor.generate_image_script(paths)

    assert "x.jpg" in exc_info.value.message
    assert "y.jpg" in exc_info.value.message
    assert fake_client.calls == []


async def test_image_script_merges_successful_analyses(image_factory):
    client = FakeClient(batch_failures={1})
    processor = VideoProcessor(client=client)
    paths = [image_factory("a.jpg"), image_factory("b.jpg"), image_factory("c.jpg")]

    result = await processor.generate_image_script(paths, ScriptOptions(script_type="narrative"))

    assert [call["op"] for call in client.calls] == ["analyze_image_batch", "generate_text"]
    assert result.analysis == "[Image 1]\nanalysis of a.jpg\n\n[Image 2]\nanalysis of c.jpg"
    assert result.images_failed == 1
    assert result.analysis_usage == TokenUsage(200, 100, 300)
    assert result.usage.total_tokens == 300 + 500
    assert "Number of images: 2" in client.calls[1]["prompt"]


async def test_image_script_fails_when_every_analysis_fails(image_factory):
    client = FakeClient(batch_failures={0, 1})
    processor = VideoProcessor(client=client)

    with pytest.raises(VidlensException):
        await processor.generate_image_script([image_factory("a.jpg"), image_factory("b.jpg")])
    assert [call["op"] for call in client.calls] == ["analyze_image_batch"]


async def test_image_script_requires_paths(fake_client):
    with pytest.raises(ValidationException):
        await VideoProcessor(client=fake_client).generate_image_script([])
