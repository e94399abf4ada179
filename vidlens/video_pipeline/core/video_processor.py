"""
High-level video and image workflows: summary, metadata and shooting scripts.

Each workflow composes the frame extractor with the Hunyuan client. Frames
extracted for an analysis are temporary and are removed once the analysis
finishes, whether it succeeded or not.
"""

from typing import List, Optional, Sequence, Union

import aiofiles.os
from loguru import logger

from ...config.settings import FrameExtractionConfig
from ...exceptions import ResourceNotFoundException, ValidationException, VidlensException
from ...models import (
    AnalysisResult,
    ExtractedFrame,
    FrameStrategy,
    ScriptResult,
    VideoAnalysisResult,
    VideoMetadata,
    total_usage,
)
from ...providers.hunyuan_providers import HunyuanClient
from ...utils.error_handler import log_exceptions
from ...utils.validation import FrameRequest, ScriptOptions, parse_request, require_path
from ..prompts_and_description import (
    IMAGE_DETAILED_ANALYSIS_PROMPT,
    VIDEO_DETAILED_ANALYSIS_PROMPT,
    VIDEO_SUMMARY_PROMPT,
    build_image_script_prompt,
    build_video_script_prompt,
)
from .frame_extractor import FrameExtractor

MAX_ANALYSIS_FRAMES = 4
DEFAULT_MAX_FRAMES = 5
DEFAULT_STRATEGY = FrameStrategy.KEYFRAME


class VideoProcessor:
    """Runs the analysis and script-generation workflows for one client."""

    def __init__(
        self,
        client: Optional[HunyuanClient] = None,
        extractor: Optional[FrameExtractor] = None,
        config: Optional[FrameExtractionConfig] = None,
        max_analysis_frames: int = MAX_ANALYSIS_FRAMES,
    ):
        self.config = config or FrameExtractionConfig()
        self.client = client
        self.extractor = extractor or FrameExtractor(config=self.config)
        self.max_analysis_frames = max_analysis_frames

    def _require_client(self) -> HunyuanClient:
        if self.client is None:
            raise ValidationException(
                "A Hunyuan client is required for analysis", error_code="MISSING_CLIENT"
            )
        return self.client

    async def _require_file(self, path: str, kind: str = "Video") -> str:
        path = require_path(path, f"{kind.lower()}_path")
        if not await aiofiles.os.path.isfile(path):
            raise ResourceNotFoundException(
                f"{kind} file does not exist or is not accessible: {path}",
                error_code=f"{kind.upper()}_NOT_FOUND",
                details={"path": path},
            )
        return path

    async def get_video_info(self, video_path: str) -> VideoMetadata:
        video_path = await self._require_file(video_path)
        logger.info(f"Getting video info: {video_path}")
        return await self.extractor.get_video_info(video_path)

    async def _extract_for_analysis(
        self, video_path: str, max_frames: int, strategy: Union[str, FrameStrategy]
    ) -> List[ExtractedFrame]:
        request = parse_request(
            FrameRequest,
            max_frames=min(max_frames, self.max_analysis_frames),
            strategy=strategy,
            quality=self.config.analysis_quality,
        )
        frames = await self.extractor.extract_frames(video_path, request)
        logger.info(f"Extracted {len(frames)} frames for analysis")
        return frames

    async def _analyze_frames(self, frames: List[ExtractedFrame], prompt: str, cleanup: bool) -> AnalysisResult:
        client = self._require_client()
        try:
            return await client.analyze_images_in_single_request([f.path for f in frames], prompt)
        finally:
            if cleanup:
                await self.extractor.cleanup_frames(frames)

    @log_exceptions(include_traceback=False, custom_message="Video analysis failed")
    async def analyze_video(
        self,
        video_path: str,
        prompt: Optional[str] = None,
        max_frames: int = DEFAULT_MAX_FRAMES,
        strategy: Union[str, FrameStrategy] = DEFAULT_STRATEGY,
        cleanup: bool = True,
    ) -> VideoAnalysisResult:
        """
        Summarize a video from a few keyframes sent in one vision request.

        At most ``max_analysis_frames`` frames are extracted regardless of
        ``max_frames``. A caller-supplied prompt replaces the default summary prompt.
        """
        video_path = await self._require_file(video_path)
        self._require_client()
        logger.info(f"Starting video analysis: {video_path}")

        frames = await self._extract_for_analysis(video_path, max_frames, strategy)
        prompt = prompt or VIDEO_SUMMARY_PROMPT.format(frame_count=len(frames))
        result = await self._analyze_frames(frames, prompt, cleanup)

        logger.info(f"Video analysis done - tokens: {result.usage.total_tokens}")
        return VideoAnalysisResult(
            summary=result.content,
            usage=result.usage,
            frame_count=len(frames),
            timestamps=[f.timestamp_seconds for f in frames],
        )

    @log_exceptions(include_traceback=False, custom_message="Video script generation failed")
    async def generate_video_script(
        self,
        video_path: str,
        options: Optional[ScriptOptions] = None,
        max_frames: int = DEFAULT_MAX_FRAMES,
        strategy: Union[str, FrameStrategy] = DEFAULT_STRATEGY,
        cleanup: bool = True,
    ) -> ScriptResult:
        """
        Write a shooting script for a video.

        Two API calls are chained: a detailed multi-frame analysis, then a
        text-model call that writes the script from that analysis.
        """
        options = options or ScriptOptions()
        video_path = await self._require_file(video_path)
        client = self._require_client()
        logger.info(f"Starting video script generation: {video_path}")

        frames = await self._extract_for_analysis(video_path, max_frames, strategy)
        analysis = await self._analyze_frames(
            frames, VIDEO_DETAILED_ANALYSIS_PROMPT.format(frame_count=len(frames)), cleanup
        )
        logger.info("Video content analysis done")

        script_prompt = build_video_script_prompt(
            analysis.content,
            script_type=options.script_type,
            target_audience=options.target_audience,
            style=options.style,
            target_duration=options.target_duration,
            custom_prompt=options.prompt,
        )
        script = await client.generate_text(script_prompt)
        logger.info(
            f"Shooting script generated - analysis tokens: {analysis.usage.total_tokens}, "
            f"script tokens: {script.usage.total_tokens}"
        )
        return ScriptResult(
            script=script.content,
            analysis=analysis.content,
            analysis_usage=analysis.usage,
            script_usage=script.usage,
        )

    @log_exceptions(include_traceback=False, custom_message="Image script generation failed")
    async def generate_image_script(
        self,
        image_paths: Sequence[str],
        options: Optional[ScriptOptions] = None,
    ) -> ScriptResult:
        """
        Write a shooting script from a set of images.

        Every image must exist before any API call is made. Images are then
        analyzed one per request; failed images are skipped as long as at
        least one analysis succeeded.
        """
        options = options or ScriptOptions()
        if not image_paths:
            raise ValidationException(
                "image_paths is required and cannot be empty", error_code="MISSING_PARAMETER"
            )
        client = self._require_client()

        missing = [path for path in image_paths if not path or not await aiofiles.os.path.isfile(path)]
        if missing:
            raise ResourceNotFoundException(
                "The following image files do not exist or are not accessible:\n" + "\n".join(map(str, missing)),
                error_code="IMAGE_NOT_FOUND",
                details={"paths": missing},
            )

        logger.info(f"Starting image script generation for {len(image_paths)} images")
        results = await client.analyze_image_batch(list(image_paths), IMAGE_DETAILED_ANALYSIS_PROMPT)
        succeeded = [result for result in results if result.succeeded]
        failed = len(results) - len(succeeded)

        if not succeeded:
            raise VidlensException(
                "All image analyses failed, no script can be generated",
                error_code="ANALYSIS_FAILED",
                details={"errors": [result.error for result in results]},
            )
        if failed:
            logger.warning(f"{failed} image analyses failed, writing the script from {len(succeeded)} images")

        combined = "\n\n".join(
            f"[Image {index}]\n{result.content}" for index, result in enumerate(succeeded, start=1)
        )
        analysis_usage = total_usage(results)

        script_prompt = build_image_script_prompt(
            combined,
            image_count=len(succeeded),
            script_type=options.script_type,
            target_audience=options.target_audience,
            style=options.style,
            target_duration=options.target_duration,
            custom_prompt=options.prompt,
        )
        script = await client.generate_text(script_prompt)
        logger.info(
            f"Image script generated - analysed: {len(succeeded)}/{len(results)}, "
            f"tokens: {analysis_usage.total_tokens + script.usage.total_tokens}"
        )
        return ScriptResult(
            script=script.content,
            analysis=combined,
            analysis_usage=analysis_usage,
            script_usage=script.usage,
            images_failed=failed,
        )
