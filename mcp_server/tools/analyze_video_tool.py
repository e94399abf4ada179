from typing import Annotated, Optional

from loguru import logger

from vidlens.providers import HunyuanClient
from vidlens.utils import ErrorHandler, require_path
from vidlens.video_pipeline import FrameExtractor, VideoProcessor
from vidlens.video_pipeline.prompts_and_description import TOOL_ANALYZE_VIDEO_CONTENT

from ..server import mcp
from .common import build_client, format_usage


async def _analyze_video_content_impl(
    video_path: str,
    prompt: Optional[str] = None,
    max_frames: int = 5,
    strategy: str = "keyframe",
    secret_id: Optional[str] = None,
    secret_key: Optional[str] = None,
    region: Optional[str] = None,
    cleanup: bool = True,
    client: Optional[HunyuanClient] = None,
    extractor: Optional[FrameExtractor] = None,
) -> str:
    """
    Implementation of analyze_video_content that can be called directly.

    Args:
        video_path: Path to the video file
        prompt: Custom analysis prompt (optional)
        max_frames: Requested frame count, capped at 4
        strategy: Frame extraction strategy
        secret_id / secret_key / region: Call-level credentials (optional)
        cleanup: Delete the temporary frames afterwards
        client: Pre-built client, bypasses credential resolution
        extractor: Frame extractor override

    Returns:
        Summary text followed by frame and token statistics.
    """
    video_path = require_path(video_path, "video_path")
    client = client or build_client(secret_id, secret_key, region)
    processor = VideoProcessor(client=client, extractor=extractor)

    logger.info(f"Analyzing video {video_path} - max frames: {max_frames}, strategy: {strategy}")
    result = await processor.analyze_video(
        video_path, prompt=prompt, max_frames=max_frames, strategy=strategy, cleanup=cleanup
    )

    timestamps = ", ".join(f"{t:.2f}" for t in result.timestamps)
    return (
        f"✅ Video analysis complete: {video_path}\n\n"
        f"📋 Summary:\n{result.summary}\n\n"
        f"📊 Statistics:\n"
        f"- Frames analyzed: {result.frame_count} (at {timestamps}s)\n"
        f"- Tokens: {format_usage(result.usage)}"
    )


@mcp.tool(name="analyze_video_content", description=TOOL_ANALYZE_VIDEO_CONTENT)
async def analyze_video_content(
    video_path: Annotated[str, "Path to the video file"],
    prompt: Annotated[Optional[str], "Analysis prompt (optional)"] = None,
    max_frames: Annotated[int, "Maximum frames to analyze, capped at 4 to control cost"] = 5,
    strategy: Annotated[str, "uniform, keyframe or scene_change"] = "keyframe",
    secret_id: Annotated[Optional[str], "Tencent Cloud SecretId"] = None,
    secret_key: Annotated[Optional[str], "Tencent Cloud SecretKey"] = None,
    region: Annotated[Optional[str], "Tencent Cloud region, default ap-beijing"] = None,
    cleanup: Annotated[bool, "Delete temporary frames after analysis"] = True,
) -> str:
    arguments = {
        "video_path": video_path,
        "prompt": prompt,
        "max_frames": max_frames,
        "strategy": strategy,
        "secret_id": secret_id,
        "secret_key": secret_key,
        "region": region,
        "cleanup": cleanup,
    }
    try:
        return await _analyze_video_content_impl(
            video_path, prompt, max_frames, strategy, secret_id, secret_key, region, cleanup
        )
    except Exception as e:
        logger.error(f"analyze_video_content failed: {ErrorHandler.scrub_secrets(str(e), arguments)}")
        return ErrorHandler.format_error(e, "analyze_video_content", arguments)
