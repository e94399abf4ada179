from typing import Annotated, List, Optional

from loguru import logger

from vidlens.exceptions import ValidationException
from vidlens.models import total_usage
from vidlens.providers import HunyuanClient
from vidlens.utils import ErrorHandler
from vidlens.video_pipeline.prompts_and_description import DEFAULT_IMAGE_BATCH_PROMPT, TOOL_ANALYZE_IMAGE_BATCH

from ..server import mcp
from .common import build_client, format_usage


async def _analyze_image_batch_impl(
    image_paths: List[str],
    prompt: Optional[str] = None,
    secret_id: Optional[str] = None,
    secret_key: Optional[str] = None,
    region: Optional[str] = None,
    client: Optional[HunyuanClient] = None,
) -> str:
    """
    Implementation of analyze_image_batch that can be called directly.

    Images that cannot be analyzed are reported in place; the rest of the
    batch still runs.
    """
    if not image_paths:
        raise ValidationException("Parameter 'image_paths' is required and cannot be empty", error_code="MISSING_PARAMETER")

    client = client or build_client(secret_id, secret_key, region)
    results = await client.analyze_image_batch(list(image_paths), prompt or DEFAULT_IMAGE_BATCH_PROMPT)

    succeeded = sum(1 for result in results if result.succeeded)
    details = "\n\n".join(
        f"📸 Image {index} ({path}):\n{result.content}"
        for index, (path, result) in enumerate(zip(image_paths, results), start=1)
    )
    return (
        "✅ Batch image analysis complete\n\n"
        f"📊 Statistics:\n"
        f"- Total images: {len(image_paths)}\n"
        f"- Succeeded: {succeeded}\n"
        f"- Failed: {len(image_paths) - succeeded}\n"
        f"- Tokens: {format_usage(total_usage(results))}\n\n"
        f"🖼️ Results:\n\n{details}"
    )


@mcp.tool(name="analyze_image_batch", description=TOOL_ANALYZE_IMAGE_BATCH)
async def analyze_image_batch(
    image_paths: Annotated[List[str], "Paths of the images to analyze"],
    prompt: Annotated[Optional[str], "Analysis prompt (optional)"] = None,
    secret_id: Annotated[Optional[str], "Tencent Cloud SecretId"] = None,
    secret_key: Annotated[Optional[str], "Tencent Cloud SecretKey"] = None,
    region: Annotated[Optional[str], "Tencent Cloud region, default ap-beijing"] = None,
) -> str:
    arguments = {
        "image_paths": image_paths,
        "prompt": prompt,
        "secret_id": secret_id,
        "secret_key": secret_key,
        "region": region,
    }
    try:
        return await _analyze_image_batch_impl(image_paths, prompt, secret_id, secret_key, region)
    except Exception as e:
        logger.error(f"analyze_image_batch failed: {ErrorHandler.scrub_secrets(str(e), arguments)}")
        return ErrorHandler.format_error(e, "analyze_image_batch", arguments)
