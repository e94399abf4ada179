"""
Video probe/capture backed by the ffmpeg and ffprobe executables.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import aiofiles.os
import ffmpeg
from loguru import logger

from ...exceptions import ExternalToolException, ExternalToolFailure, ResourceNotFoundException
from ...models import VideoMetadata

DEFAULT_FRAME_RATE = 25.0
CAPTURE_TIMEOUT_SECONDS = 30.0


def quality_to_qscale(quality: int) -> int:
    """Map a 1-100 quality percentage onto ffmpeg's JPEG ``-q:v`` scale (lower is better)."""
    return (100 - quality) // 10


def parse_frame_rate(value: Optional[str]) -> float:
    """Parse ffprobe's ``r_frame_rate`` ("30000/1001", "25/1" or "25")."""
    if not value:
        return DEFAULT_FRAME_RATE
    try:
        if "/" in value:
            numerator, denominator = value.split("/", 1)
            denominator = float(denominator)
            if denominator == 0:
                return DEFAULT_FRAME_RATE
            return float(numerator) / denominator
        return float(value) or DEFAULT_FRAME_RATE
    except ValueError:
        return DEFAULT_FRAME_RATE


class VideoDecoder(ABC):
    """Abstract collaborator that reads video metadata and captures still frames."""

    @abstractmethod
    async def probe(self, video_path: str) -> VideoMetadata:
        """
        Read container and stream metadata.

        Raises:
            ResourceNotFoundException: If the file is missing.
            ExternalToolException: For any other probe failure.
        """
        pass

    @abstractmethod
    async def capture(self, video_path: str, timestamp: float, output_path: str, quality: int) -> None:
        """
        Write the frame at ``timestamp`` to ``output_path`` as a JPEG.

        Raises:
            ExternalToolException: If the frame could not be written.
        """
        pass


class FfmpegVideoDecoder(VideoDecoder):
    """Decoder that shells out to ffprobe (via ffmpeg-python) and ffmpeg."""

    def __init__(
        self,
        ffmpeg_cmd: str = "ffmpeg",
        ffprobe_cmd: str = "ffprobe",
        capture_timeout: float = CAPTURE_TIMEOUT_SECONDS,
    ):
        self.ffmpeg_cmd = ffmpeg_cmd
        self.ffprobe_cmd = ffprobe_cmd
        self.capture_timeout = capture_timeout

    # ------------------------------------------------------------------
    # Metadata helpers
    # ------------------------------------------------------------------
    async def probe(self, video_path: str) -> VideoMetadata:
        try:
            info = await asyncio.to_thread(ffmpeg.probe, video_path, cmd=self.ffprobe_cmd)
        except FileNotFoundError as e:
            raise ExternalToolException(
                f"FFmpeg is not installed or not configured correctly ({self.ffprobe_cmd} not found): {e}",
                kind=ExternalToolFailure.NOT_INSTALLED,
            ) from e
        except ffmpeg.Error as e:
            raise self._probe_error(video_path, e) from e

        return self._metadata_from_probe(video_path, info)

    def _probe_error(self, video_path: str, error: ffmpeg.Error) -> Exception:
        stderr = (error.stderr or b"").decode("utf-8", errors="replace").strip()
        if "No such file" in stderr:
            return ResourceNotFoundException(
                f"Video file does not exist: {video_path}",
                error_code="VIDEO_NOT_FOUND",
                details={"path": video_path},
            )
        if "Invalid data" in stderr:
            return ExternalToolException(
                f"Video file format is invalid or the file is corrupted: {video_path}",
                kind=ExternalToolFailure.INVALID_DATA,
                details={"stderr": stderr[-500:]},
            )
        if "Permission denied" in stderr:
            return ExternalToolException(
                f"No permission to read video file: {video_path}",
                kind=ExternalToolFailure.PERMISSION,
            )
        return ExternalToolException(
            f"Failed to read video metadata: {stderr[-500:] or error}",
            kind=ExternalToolFailure.UNKNOWN,
            details={"stderr": stderr[-500:]},
        )

    @staticmethod
    def _metadata_from_probe(video_path: str, info: Dict[str, Any]) -> VideoMetadata:
        streams = info.get("streams") or []
        video_stream = next((s for s in streams if s.get("codec_type") == "video"), None)
        if video_stream is None:
            raise ExternalToolException(
                f"No video stream found, the file may be audio only: {video_path}",
                kind=ExternalToolFailure.NO_VIDEO_STREAM,
            )

        fmt = info.get("format") or {}
        try:
            duration = float(fmt.get("duration") or 0)
        except (TypeError, ValueError):
            duration = 0.0
        if duration <= 0:
            raise ExternalToolException(
                f"Invalid video duration ({duration}s), the file may be damaged: {video_path}",
                kind=ExternalToolFailure.INVALID_DURATION,
            )

        metadata = VideoMetadata(
            duration_seconds=duration,
            width=int(video_stream.get("width") or 0),
            height=int(video_stream.get("height") or 0),
            frame_rate=parse_frame_rate(video_stream.get("r_frame_rate")),
            container_format=fmt.get("format_name") or "unknown",
        )
        logger.info(
            f"Video info - duration: {metadata.duration_seconds:.2f}s, "
            f"resolution: {metadata.width}x{metadata.height}, frame rate: {metadata.frame_rate:.2f}fps"
        )
        return metadata

    # ------------------------------------------------------------------
    # Frame capture
    # ------------------------------------------------------------------
    def build_capture_command(self, video_path: str, timestamp: float, output_path: str, quality: int):
        stream = (
            ffmpeg.input(video_path, ss=timestamp)
            .output(output_path, vframes=1, **{"q:v": quality_to_qscale(quality)})
            .global_args("-hide_banner", "-loglevel", "error")
            .overwrite_output()
        )
        return stream.compile(cmd=self.ffmpeg_cmd)

    async def capture(self, video_path: str, timestamp: float, output_path: str, quality: int) -> None:
        if timestamp < 0:
            raise ExternalToolException(
                f"Timestamp cannot be negative: {timestamp}",
                kind=ExternalToolFailure.INVALID_SEEK,
            )

        command = self.build_capture_command(video_path, timestamp, output_path, quality)
        logger.debug(f"FFmpeg command: {' '.join(command)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise ExternalToolException(
                f"FFmpeg is not installed or not configured correctly ({self.ffmpeg_cmd} not found): {e}",
                kind=ExternalToolFailure.NOT_INSTALLED,
            ) from e

        try:
            _, err = await asyncio.wait_for(process.communicate(), timeout=self.capture_timeout)
        except asyncio.TimeoutError as e:
            process.kill()
            await process.wait()
            raise ExternalToolException(
                f"Frame capture timed out at {timestamp:.2f}s after {self.capture_timeout}s",
                kind=ExternalToolFailure.TIMEOUT,
            ) from e

        stderr = err.decode("utf-8", errors="replace").strip()
        if process.returncode != 0:
            raise self._capture_error(video_path, timestamp, output_path, stderr)

        # ffmpeg exits cleanly without writing anything when seeking past the end
        if not await aiofiles.os.path.isfile(output_path) or await aiofiles.os.path.getsize(output_path) == 0:
            raise ExternalToolException(
                f"No frame data at {timestamp:.2f}s, the position may be beyond the end of the video",
                kind=ExternalToolFailure.INVALID_SEEK,
            )

    @staticmethod
    def _capture_error(video_path: str, timestamp: float, output_path: str, stderr: str) -> ExternalToolException:
        if "Invalid data" in stderr:
            return ExternalToolException(
                f"Invalid video data at {timestamp:.2f}s, the position may be beyond the end or the video is damaged",
                kind=ExternalToolFailure.INVALID_SEEK,
            )
        if "No such file" in stderr:
            return ExternalToolException(
                f"Video file disappeared during processing: {video_path}",
                kind=ExternalToolFailure.INVALID_DATA,
            )
        if "Permission denied" in stderr:
            return ExternalToolException(
                f"No permission to write output file: {output_path}",
                kind=ExternalToolFailure.PERMISSION,
            )
        if "No space left" in stderr:
            return ExternalToolException(
                f"Not enough disk space to save frame file: {output_path}",
                kind=ExternalToolFailure.DISK_FULL,
            )
        return ExternalToolException(
            f"Frame capture failed at {timestamp:.2f}s: {stderr[-500:]}",
            kind=ExternalToolFailure.UNKNOWN,
            details={"stderr": stderr[-500:]},
        )
