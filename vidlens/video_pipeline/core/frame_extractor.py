import os
from typing import Iterable, List, Optional, Union

import aiofiles.os
from loguru import logger

from ...config.settings import FrameExtractionConfig
from ...exceptions import (
    ExternalToolException,
    ExternalToolFailure,
    ResourceNotFoundException,
    VidlensException,
)
from ...models import CleanupReport, ExtractedFrame, VideoMetadata
from ...utils.validation import FrameRequest
from .decoder import FfmpegVideoDecoder, VideoDecoder
from .frame_selector import FrameSelector


def frame_file_name(video_path: str, index: int, timestamp: float) -> str:
    """``{stem}_frame_{n}_{t}s.jpg`` with a 1-based frame number and two-decimal timestamp."""
    stem = os.path.splitext(os.path.basename(video_path))[0]
    return f"{stem}_frame_{index + 1}_{timestamp:.2f}s.jpg"


class FrameExtractor:
    """
    Probes a video, selects timestamps and captures one JPEG per timestamp.

    Captures run one after another in increasing timestamp order. Every path
    returned by ``extract_frames`` points to a file that exists at the moment
    of return; failed captures are left out of the result.
    """

    def __init__(
        self,
        decoder: Optional[VideoDecoder] = None,
        selector: Optional[FrameSelector] = None,
        output_dir: Optional[str] = None,
        config: Optional[FrameExtractionConfig] = None,
    ):
        config = config or FrameExtractionConfig()
        self.decoder = decoder or FfmpegVideoDecoder(capture_timeout=config.capture_timeout_seconds)
        self.selector = selector or FrameSelector(
            fallback_duration=config.fallback_duration_seconds,
            large_request_warning=config.large_request_warning,
        )
        self.output_dir = output_dir or config.output_dir
        self.failure_threshold = config.failure_threshold

    async def get_video_info(self, video_path: str) -> VideoMetadata:
        """Probe a video once and return its metadata snapshot."""
        if not await aiofiles.os.path.isfile(video_path):
            raise ResourceNotFoundException(
                f"Video file does not exist or is not accessible: {video_path}",
                error_code="VIDEO_NOT_FOUND",
                details={"path": video_path},
            )
        return await self.decoder.probe(video_path)

    async def extract_frames(self, video_path: str, request: FrameRequest) -> List[ExtractedFrame]:
        """
        Extract frames from a video.

        Args:
            video_path: Path to the video file.
            request: Frame budget, strategy, output directory and JPEG quality.

        Returns:
            The extracted frames in timestamp order.

        Raises:
            ResourceNotFoundException: If the video file is missing.
            ExternalToolException: If probing fails, if the first captures keep
                failing, or if no frame could be extracted at all.
        """
        metadata = await self.get_video_info(video_path)
        timestamps = self.selector.select(metadata.duration_seconds, request.max_frames, request.strategy)

        output_dir = request.output_dir or self.output_dir
        await aiofiles.os.makedirs(output_dir, exist_ok=True)
        logger.info(
            f"Extracting {len(timestamps)} frames to {output_dir} at "
            f"{', '.join(f'{t:.2f}' for t in timestamps)}s"
        )

        frames: List[ExtractedFrame] = []
        failures = 0
        for index, timestamp in enumerate(timestamps):
            frame_path = os.path.join(output_dir, frame_file_name(video_path, index, timestamp))
            logger.info(f"Extracting frame {index + 1}/{len(timestamps)} at {timestamp:.2f}s")
            try:
                await self.decoder.capture(video_path, timestamp, frame_path, request.quality)
            except VidlensException as e:
                failures += 1
                logger.error(f"Frame {index + 1} failed at {timestamp:.2f}s: {e.message}")
                await self._discard(frame_path)
                if failures >= self.failure_threshold and not frames:
                    raise ExternalToolException(
                        f"Frame extraction aborted after {failures} failed captures with no success. "
                        f"Last error: {e.message}",
                        kind=ExternalToolFailure.NO_FRAMES,
                    ) from e
                continue

            frames.append(ExtractedFrame(path=frame_path, timestamp_seconds=timestamp, sequence_index=index))

        logger.info(f"Frame extraction done - succeeded: {len(frames)}, failed: {failures}")
        if not frames:
            raise ExternalToolException(
                "All frame captures failed, check the video file and the FFmpeg installation",
                kind=ExternalToolFailure.NO_FRAMES,
            )
        return frames

    async def _discard(self, path: str) -> None:
        try:
            if await aiofiles.os.path.exists(path):
                await aiofiles.os.remove(path)
        except OSError as e:
            logger.warning(f"Could not remove partial frame file {path}: {e}")

    async def cleanup_frames(self, frames: Iterable[Union[str, ExtractedFrame]]) -> CleanupReport:
        """Delete frame files. Failures are counted and logged, never raised."""
        paths = [f.path if isinstance(f, ExtractedFrame) else f for f in frames]
        logger.info(f"Cleaning up {len(paths)} temporary frame files")

        removed = 0
        failed = 0
        for path in paths:
            try:
                await aiofiles.os.remove(path)
                removed += 1
            except OSError as e:
                failed += 1
                logger.warning(f"Could not delete file {path}: {e}")

        logger.info(f"Cleanup done - removed: {removed}, failed: {failed}")
        if failed:
            logger.warning("Some temporary files could not be removed and may need manual deletion")
        return CleanupReport(removed=removed, failed=failed)
