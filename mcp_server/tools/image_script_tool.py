from typing import Annotated, List, Optional

from loguru import logger

from vidlens.providers import HunyuanClient
from vidlens.utils import ErrorHandler, ScriptOptions, parse_request
from vidlens.video_pipeline import VideoProcessor
from vidlens.video_pipeline.prompts_and_description import TOOL_GENERATE_IMAGE_SCRIPT

from ..server import mcp
from .common import build_client, format_script_result


async def _generate_image_script_impl(
    image_paths: List[str],
    prompt: Optional[str] = None,
    script_type: str = "commercial",
    target_duration: Optional[float] = None,
    target_audience: str = "general audience",
    style: str = "professional and engaging",
    secret_id: Optional[str] = None,
    secret_key: Optional[str] = None,
    region: Optional[str] = None,
    client: Optional[HunyuanClient] = None,
) -> str:
    options = parse_request(
        ScriptOptions,
        prompt=prompt,
        script_type=script_type,
        target_duration=target_duration,
        target_audience=target_audience,
        style=style,
    )
    client = client or build_client(secret_id, secret_key, region)
    processor = VideoProcessor(client=client)

    result = await processor.generate_image_script(image_paths, options)
    header = f"✅ Shooting script generated from {len(image_paths)} images"
    if result.images_failed:
        header += f" ({result.images_failed} could not be analyzed)"
    return format_script_result(header, result, "Image analysis")


@mcp.tool(name="generate_image_script", description=TOOL_GENERATE_IMAGE_SCRIPT)
async def generate_image_script(
    image_paths: Annotated[List[str], "Paths of the source images"],
    prompt: Annotated[Optional[str], "Extra requirements for the script (optional)"] = None,
    script_type: Annotated[str, "commercial, documentary, tutorial, narrative or custom"] = "commercial",
    target_duration: Annotated[Optional[float], "Target script length in seconds"] = None,
    target_audience: Annotated[str, "Intended audience"] = "general audience",
    style: Annotated[str, "Shooting style"] = "professional and engaging",
    secret_id: Annotated[Optional[str], "Tencent Cloud SecretId"] = None,
    secret_key: Annotated[Optional[str], "Tencent Cloud SecretKey"] = None,
    region: Annotated[Optional[str], "Tencent Cloud region, default ap-beijing"] = None,
) -> str:
    arguments = {
        "image_paths": image_paths,
        "prompt": prompt,
        "script_type": script_type,
        "target_duration": target_duration,
        "target_audience": target_audience,
        "style": style,
        "secret_id": secret_id,
        "secret_key": secret_key,
        "region": region,
    }
    try:
        return await _generate_image_script_impl(
            image_paths,
            prompt=prompt,
            script_type=script_type,
            target_duration=target_duration,
            target_audience=target_audience,
            style=style,
            secret_id=secret_id,
            secret_key=secret_key,
            region=region,
        )
    except Exception as e:
        logger.error(f"generate_image_script failed: {ErrorHandler.scrub_secrets(str(e), arguments)}")
        return ErrorHandler.format_error(e, "generate_image_script", arguments)
