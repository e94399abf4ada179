from typing import Annotated, Optional

from loguru import logger

from vidlens.providers import HunyuanClient
from vidlens.utils import ErrorHandler, ScriptOptions, parse_request, require_path
from vidlens.video_pipeline import FrameExtractor, VideoProcessor
from vidlens.video_pipeline.prompts_and_description import TOOL_GENERATE_VIDEO_SCRIPT

from ..server import mcp
from .common import build_client, format_script_result


async def _generate_video_script_impl(
    video_path: str,
    prompt: Optional[str] = None,
    max_frames: int = 5,
    strategy: str = "keyframe",
    script_type: str = "commercial",
    target_duration: Optional[float] = None,
    target_audience: str = "general audience",
    style: str = "professional and engaging",
    secret_id: Optional[str] = None,
    secret_key: Optional[str] = None,
    region: Optional[str] = None,
    cleanup: bool = True,
    client: Optional[HunyuanClient] = None,
    extractor: Optional[FrameExtractor] = None,
) -> str:
    video_path = require_path(video_path, "video_path")
    options = parse_request(
        ScriptOptions,
        prompt=prompt,
        script_type=script_type,
        target_duration=target_duration,
        target_audience=target_audience,
        style=style,
    )
    client = client or build_client(secret_id, secret_key, region)
    processor = VideoProcessor(client=client, extractor=extractor)

    result = await processor.generate_video_script(
        video_path, options, max_frames=max_frames, strategy=strategy, cleanup=cleanup
    )
    return format_script_result(f"✅ Shooting script generated from video: {video_path}", result, "Video analysis")


@mcp.tool(name="generate_video_script", description=TOOL_GENERATE_VIDEO_SCRIPT)
async def generate_video_script(
    video_path: Annotated[str, "Path to the video file"],
    prompt: Annotated[Optional[str], "Extra requirements for the script (optional)"] = None,
    max_frames: Annotated[int, "Maximum frames to analyze, capped at 4"] = 5,
    strategy: Annotated[str, "uniform, keyframe or scene_change"] = "keyframe",
    script_type: Annotated[str, "commercial, documentary, tutorial, narrative or custom"] = "commercial",
    target_duration: Annotated[Optional[float], "Target script length in seconds"] = None,
    target_audience: Annotated[str, "Intended audience"] = "general audience",
    style: Annotated[str, "Shooting style"] = "professional and engaging",
    secret_id: Annotated[Optional[str], "Tencent Cloud SecretId"] = None,
    secret_key: Annotated[Optional[str], "Tencent Cloud SecretKey"] = None,
    region: Annotated[Optional[str], "Tencent Cloud region, default ap-beijing"] = None,
    cleanup: Annotated[bool, "Delete temporary frames afterwards"] = True,
) -> str:
    arguments = {
        "video_path": video_path,
        "prompt": prompt,
        "max_frames": max_frames,
        "strategy": strategy,
        "script_type": script_type,
        "target_duration": target_duration,
        "target_audience": target_audience,
        "style": style,
        "secret_id": secret_id,
        "secret_key": secret_key,
        "region": region,
        "cleanup": cleanup,
    }
    try:
        return await _generate_video_script_impl(
            video_path,
            prompt=prompt,
            max_frames=max_frames,
            strategy=strategy,
            script_type=script_type,
            target_duration=target_duration,
            target_audience=target_audience,
            style=style,
            secret_id=secret_id,
            secret_key=secret_key,
            region=region,
            cleanup=cleanup,
        )
    except Exception as e:
        logger.error(f"generate_video_script failed: {ErrorHandler.scrub_secrets(str(e), arguments)}")
        return ErrorHandler.format_error(e, "generate_video_script", arguments)
