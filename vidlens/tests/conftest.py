"""
Shared fixtures: fake decoder, fake Hunyuan client, sample files.
"""

import os
from typing import Dict, List, Optional, Set

import pytest
from loguru import logger

from vidlens.exceptions import ExternalToolException, ExternalToolFailure, VidlensException
from vidlens.models import AnalysisResult, TokenUsage, VideoMetadata
from vidlens.providers.base import LLMProvider, VisionProvider
from vidlens.providers.credentials import HunyuanCredentials
from vidlens.video_pipeline.core.decoder import VideoDecoder

SECRET_ID = "AKIDexample0000000000000000000wxyz"
SECRET_KEY = "sk-raw-secret-value-that-must-never-leak"
FIXED_TIMESTAMP = 1700000000
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 64


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep developer credentials, overrides and any local .env out of the tests."""
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.startswith(("HUNYUAN_", "FRAMES_", "LOG_", "VIDLENS_")):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def credentials() -> HunyuanCredentials:
    return HunyuanCredentials(secret_id=SECRET_ID, secret_key=SECRET_KEY)


@pytest.fixture
def image_factory(tmp_path):
    def make(name: str = "image.jpg", data: bytes = JPEG_BYTES) -> str:
        path = tmp_path / name
        path.write_bytes(data)
        return str(path)

    return make


@pytest.fixture
def video_file(tmp_path) -> str:
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"not really a video")
    return str(path)


class FakeDecoder(VideoDecoder):
    """In-memory decoder; captures write small files unless told to fail."""

    def __init__(
        self,
        duration: float = 10.0,
        probe_error: Optional[Exception] = None,
        failing_indices: Optional[Set[int]] = None,
        fail_all: bool = False,
        leave_partial_file: bool = False,
    ):
        self.duration = duration
        self.probe_error = probe_error
        self.failing_indices = failing_indices or set()
        self.fail_all = fail_all
        self.leave_partial_file = leave_partial_file
        self.probe_calls: List[str] = []
        self.capture_calls: List[Dict] = []

    async def probe(self, video_path: str) -> VideoMetadata:
        self.probe_calls.append(video_path)
        if self.probe_error is not None:
            raise self.probe_error
        return VideoMetadata(
            duration_seconds=self.duration,
            width=1920,
            height=1080,
            frame_rate=25.0,
            container_format="mov,mp4,m4a,3gp,3g2,mj2",
        )

    async def capture(self, video_path: str, timestamp: float, output_path: str, quality: int) -> None:
        index = len(self.capture_calls)
        self.capture_calls.append(
            {"video_path": video_path, "timestamp": timestamp, "output_path": output_path, "quality": quality}
        )
        if self.fail_all or index in self.failing_indices:
            if self.leave_partial_file:
                with open(output_path, "wb") as f:
                    f.write(b"")
            raise ExternalToolException(
                f"Invalid video data at {timestamp:.2f}s", kind=ExternalToolFailure.INVALID_SEEK
            )
        with open(output_path, "wb") as f:
            f.write(JPEG_BYTES)


class FakeClient(VisionProvider, LLMProvider):
    """Records calls and returns canned results with fixed token usage."""

    def __init__(
        self,
        vision_usage: TokenUsage = TokenUsage(100, 50, 150),
        text_usage: TokenUsage = TokenUsage(200, 300, 500),
        batch_failures: Optional[Set[int]] = None,
        single_request_error: Optional[VidlensException] = None,
    ):
        self.vision_usage = vision_usage
        self.text_usage = text_usage
        self.batch_failures = batch_failures or set()
        self.single_request_error = single_request_error
        self.calls: List[Dict] = []

    async def analyze_image(self, image_path: str, prompt: str) -> AnalysisResult:
        self.calls.append({"op": "analyze_image", "paths": [image_path], "prompt": prompt})
        return AnalysisResult(content=f"analysis of {os.path.basename(image_path)}", usage=self.vision_usage, images_analyzed=1)

    async def analyze_image_batch(self, image_paths: List[str], prompt: str) -> List[AnalysisResult]:
        self.calls.append({"op": "analyze_image_batch", "paths": list(image_paths), "prompt": prompt})
        results = []
        for index, path in enumerate(image_paths):
            if index in self.batch_failures:
                results.append(AnalysisResult.failure(f"could not analyze {path}"))
            else:
                results.append(
                    AnalysisResult(content=f"analysis of {os.path.basename(path)}", usage=self.vision_usage, images_analyzed=1)
                )
        return results

    async def analyze_images_in_single_request(self, image_paths: List[str], prompt: str) -> AnalysisResult:
        self.calls.append({"op": "analyze_images_in_single_request", "paths": list(image_paths), "prompt": prompt})
        for path in image_paths:
            assert os.path.isfile(path), f"frame missing while analyzing: {path}"
        if self.single_request_error is not None:
            raise self.single_request_error
        return AnalysisResult(
            content=f"summary of {len(image_paths)} frames", usage=self.vision_usage, images_analyzed=len(image_paths)
        )

    async def generate_text(self, prompt: str, model: Optional[str] = None) -> AnalysisResult:
        self.calls.append({"op": "generate_text", "prompt": prompt, "model": model})
        return AnalysisResult(content="## Video title\nA script", usage=self.text_usage)


@pytest.fixture
def fake_decoder() -> FakeDecoder:
    return FakeDecoder()


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def warnings_logged():
    """Messages logged through loguru at WARNING or above during the test."""
    messages: List[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)
