from typing import Annotated, Optional

from loguru import logger

from vidlens.utils import ErrorHandler, require_path
from vidlens.video_pipeline import VideoProcessor
from vidlens.video_pipeline.prompts_and_description import TOOL_GET_VIDEO_INFO

from ..server import mcp
from .common import format_duration


async def _get_video_info_impl(video_path: str, processor: Optional[VideoProcessor] = None) -> str:
    video_path = require_path(video_path, "video_path")
    processor = processor or VideoProcessor()
    info = await processor.get_video_info(video_path)
    return (
        f"✅ Video info: {video_path}\n\n"
        f"⏱️ Duration: {format_duration(info.duration_seconds)}\n"
        f"📐 Resolution: {info.width} × {info.height} px\n"
        f"🎞️ Frame rate: {info.frame_rate:.2f} fps\n"
        f"🎬 Total frames: {info.frame_count}\n"
        f"📁 Format: {info.container_format}"
    )


@mcp.tool(name="get_video_info", description=TOOL_GET_VIDEO_INFO)
async def get_video_info(video_path: Annotated[str, "Path to the video file"]) -> str:
    try:
        return await _get_video_info_impl(video_path)
    except Exception as e:
        logger.error(f"get_video_info failed: {e}")
        return ErrorHandler.format_error(e, "get_video_info", {"video_path": video_path})
