from typing import Annotated, Optional

from loguru import logger

from vidlens.config import FrameExtractionConfig
from vidlens.utils import ErrorHandler, FrameRequest, parse_request, require_path
from vidlens.video_pipeline import FrameExtractor
from vidlens.video_pipeline.prompts_and_description import TOOL_EXTRACT_VIDEO_FRAMES

from ..server import mcp


async def _extract_video_frames_impl(
    video_path: str,
    max_frames: int = 10,
    output_dir: Optional[str] = None,
    strategy: str = "uniform",
    quality: Optional[int] = None,
    extractor: Optional[FrameExtractor] = None,
) -> str:
    """
    Implementation of extract_video_frames that can be called directly.

    Returns:
        Text listing every saved frame with its timestamp.
    """
    video_path = require_path(video_path, "video_path")
    config = FrameExtractionConfig()
    if quality is None:
        quality = config.default_quality
    request = parse_request(
        FrameRequest, max_frames=max_frames, strategy=strategy, output_dir=output_dir, quality=quality
    )
    extractor = extractor or FrameExtractor(config=config)

    logger.info(f"Extracting frames from {video_path} - max frames: {max_frames}, strategy: {strategy}")
    frames = await extractor.extract_frames(video_path, request)

    listing = "\n".join(
        f"{index}. {frame.path} ({frame.timestamp_seconds:.2f}s)" for index, frame in enumerate(frames, start=1)
    )
    return (
        f"✅ Extracted {len(frames)} frames from video: {video_path}\n\n"
        f"📁 Frame files:\n{listing}"
    )


@mcp.tool(name="extract_video_frames", description=TOOL_EXTRACT_VIDEO_FRAMES)
async def extract_video_frames(
    video_path: Annotated[str, "Path to the video file"],
    max_frames: Annotated[int, "Maximum number of frames to extract"] = 10,
    output_dir: Annotated[Optional[str], "Output directory (optional)"] = None,
    strategy: Annotated[str, "uniform, keyframe or scene_change"] = "uniform",
    quality: Annotated[Optional[int], "JPEG quality from 1 to 100 (default from FRAMES_DEFAULT_QUALITY, 90)"] = None,
) -> str:
    arguments = {
        "video_path": video_path,
        "max_frames": max_frames,
        "output_dir": output_dir,
        "strategy": strategy,
        "quality": quality,
    }
    try:
        return await _extract_video_frames_impl(video_path, max_frames, output_dir, strategy, quality)
    except Exception as e:
        logger.error(f"extract_video_frames failed: {e}")
        return ErrorHandler.format_error(e, "extract_video_frames", arguments)
