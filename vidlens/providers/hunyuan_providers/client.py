import asyncio
import base64
import json
import os
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

import aiofiles
import aiofiles.os
import aiohttp
from loguru import logger

from ...config.settings import HunyuanConfig
from ...exceptions import (
    ResourceNotFoundException,
    SizeLimitExceededException,
    TransportException,
    UpstreamApplicationException,
    UpstreamErrorKind,
    ValidationException,
    VidlensException,
)
from ...models import AnalysisResult, TokenUsage
from ..base import LLMProvider, VisionProvider
from ..credentials import HunyuanCredentials
from .signing import CONTENT_TYPE, sign

SERVICE = "hunyuan"
ACTION = "ChatCompletions"
API_VERSION = "2023-09-01"

DEFAULT_VISION_MODEL = "hunyuan-vision"
DEFAULT_TEXT_MODEL = "hunyuan-lite"
DEFAULT_IMAGE_PROMPT = "Describe the content of this image."
DEFAULT_MULTI_IMAGE_PROMPT = "Describe the content of these images."
MAX_IMAGE_BYTES = 5 * 1024 * 1024

MIME_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
    "bmp": "image/bmp",
    "gif": "image/gif",
}


@dataclass(frozen=True)
class BatchPolicy:
    """Pacing for sequential calls and the image cap for multi-image requests."""
    request_interval_seconds: float = 1.0
    max_images_per_request: int = 4


def classify_error_code(code: Optional[str]) -> UpstreamErrorKind:
    """Map a Hunyuan error code onto the local error kinds."""
    code = code or ""
    if code == "FailedOperation.ServiceNotActivated":
        return UpstreamErrorKind.SERVICE_NOT_ACTIVATED
    if code == "AuthFailure" or code.startswith("AuthFailure."):
        return UpstreamErrorKind.AUTH_FAILURE
    if code == "LimitExceeded" or code.startswith("LimitExceeded."):
        return UpstreamErrorKind.RATE_LIMITED
    if code.startswith("InvalidParameter"):
        return UpstreamErrorKind.INVALID_PARAMETER
    if code.startswith("ResourceNotFound"):
        return UpstreamErrorKind.RESOURCE_NOT_FOUND
    return UpstreamErrorKind.UNKNOWN


class HunyuanClient(VisionProvider, LLMProvider):
    """
    Client for the Hunyuan ChatCompletions API signed with TC3-HMAC-SHA256.

    Calls are issued one at a time and never retried; callers that want
    retries wrap the client themselves.
    """

    def __init__(
        self,
        credentials: HunyuanCredentials,
        policy: Optional[BatchPolicy] = None,
        vision_model: str = DEFAULT_VISION_MODEL,
        text_model: str = DEFAULT_TEXT_MODEL,
        timeout: float = 120,
        max_image_bytes: int = MAX_IMAGE_BYTES,
        session: Optional[aiohttp.ClientSession] = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.credentials = credentials
        self.policy = policy or BatchPolicy()
        self.vision_model = vision_model
        self.text_model = text_model
        self.timeout = timeout
        self.max_image_bytes = max_image_bytes
        self._session = session
        self._clock = clock
        self._sleep = sleep

    @classmethod
    def from_config(cls, credentials: HunyuanCredentials, config: Optional[HunyuanConfig] = None, **kwargs) -> "HunyuanClient":
        config = config or HunyuanConfig()
        return cls(
            credentials,
            policy=BatchPolicy(
                request_interval_seconds=config.request_interval_seconds,
                max_images_per_request=config.max_images_per_request,
            ),
            vision_model=config.vision_model,
            text_model=config.text_model,
            timeout=config.timeout,
            max_image_bytes=int(config.max_image_size_mb * 1024 * 1024),
            **kwargs,
        )

    def with_credentials(self, credentials: HunyuanCredentials) -> "HunyuanClient":
        """Return a client identical to this one but bound to other credentials."""
        return HunyuanClient(
            credentials,
            policy=self.policy,
            vision_model=self.vision_model,
            text_model=self.text_model,
            timeout=self.timeout,
            max_image_bytes=self.max_image_bytes,
            session=self._session,
            clock=self._clock,
            sleep=self._sleep,
        )

    # ------------------------------------------------------------------
    # Image encoding
    # ------------------------------------------------------------------
    async def encode_image(self, image_path: str) -> str:
        """Read an image and return it as a base64 data URI."""
        if not await aiofiles.os.path.isfile(image_path):
            raise ResourceNotFoundException(
                f"Image file does not exist or is not accessible: {image_path}",
                error_code="IMAGE_NOT_FOUND",
                details={"path": image_path},
            )

        size = await aiofiles.os.path.getsize(image_path)
        size_mb = size / (1024 * 1024)
        if size > self.max_image_bytes:
            limit_mb = self.max_image_bytes / (1024 * 1024)
            raise SizeLimitExceededException(
                f"Image file too large ({size_mb:.2f}MB), use images under {limit_mb:g}MB. File: {image_path}",
                error_code="IMAGE_TOO_LARGE",
                details={"path": image_path, "size_bytes": size},
            )

        try:
            async with aiofiles.open(image_path, "rb") as f:
                data = await f.read()
        except OSError as e:
            raise ResourceNotFoundException(
                f"Image file could not be read: {image_path} ({e})",
                error_code="IMAGE_NOT_READABLE",
                details={"path": image_path},
            ) from e

        ext = os.path.splitext(image_path)[1].lower().lstrip(".")
        mime_type = MIME_TYPES.get(ext)
        if mime_type is None:
            logger.warning(f"Unknown image format: {ext or '<none>'}, falling back to image/jpeg")
            mime_type = "image/jpeg"

        logger.debug(f"Encoded image {image_path} - size: {size_mb:.2f}MB, format: {mime_type}")
        return f"data:{mime_type};base64,{base64.b64encode(data).decode('utf-8')}"

    # ------------------------------------------------------------------
    # Request building and transport
    # ------------------------------------------------------------------
    def _vision_params(self, prompt: str, data_uris: List[str]) -> Dict[str, Any]:
        contents = [{"Type": "text", "Text": prompt}]
        contents.extend({"Type": "image_url", "ImageUrl": {"Url": uri}} for uri in data_uris)
        return {
            "Model": self.vision_model,
            "Messages": [{"Role": "user", "Contents": contents}],
            "Stream": False,
        }

    def _text_params(self, prompt: str, model: str) -> Dict[str, Any]:
        return {
            "Model": model,
            "Messages": [{"Role": "user", "Content": prompt}],
            "Stream": False,
        }

    def build_headers(self, body: bytes, timestamp: int) -> Dict[str, str]:
        authorization = sign(
            body,
            secret_id=self.credentials.secret_id,
            secret_key=self.credentials.secret_key,
            timestamp=timestamp,
            service=SERVICE,
            host=self.credentials.endpoint,
            action=ACTION,
            version=API_VERSION,
        )
        return {
            "Authorization": authorization,
            "Content-Type": CONTENT_TYPE,
            "Host": self.credentials.endpoint,
            "X-TC-Action": ACTION,
            "X-TC-Timestamp": str(timestamp),
            "X-TC-Version": API_VERSION,
            "X-TC-Region": self.credentials.region,
        }

    @property
    def url(self) -> str:
        return f"https://{self.credentials.endpoint}/"

    async def _post(self, session: aiohttp.ClientSession, body: bytes, headers: Dict[str, str]) -> Dict[str, Any]:
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with session.post(self.url, data=body, headers=headers, timeout=timeout) as response:
            text = await response.text()
            if not 200 <= response.status < 300:
                raise TransportException(
                    f"Tencent Cloud API request failed (HTTP {response.status} {response.reason}):\n{text[:2000]}\n\n"
                    f"Endpoint: {self.credentials.endpoint}, region: {self.credentials.region}",
                    status=response.status,
                    body=text[:2000],
                )
        try:
            return json.loads(text)
        except ValueError as e:
            raise TransportException(
                f"Tencent Cloud API returned a non-JSON body: {text[:200]}",
                status=response.status,
                body=text[:2000],
            ) from e

    async def _call(self, params: Dict[str, Any], context: str) -> Dict[str, Any]:
        """Sign and send one request; return the ``Response`` object of a successful call."""
        # The signed hash must cover exactly the bytes that are sent
        body = json.dumps(params, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
        timestamp = int(self._clock())
        headers = self.build_headers(body, timestamp)

        logger.info(f"Sending {params['Model']} request to Hunyuan (region: {self.credentials.region})")
        try:
            if self._session is not None:
                result = await self._post(self._session, body, headers)
            else:
                async with aiohttp.ClientSession() as session:
                    result = await self._post(session, body, headers)
        except aiohttp.ClientError as e:
            raise TransportException(
                f"Network error while calling Tencent Cloud API ({self.credentials.endpoint}): {e}"
            ) from e
        except asyncio.TimeoutError as e:
            raise TransportException(
                f"Tencent Cloud API request timed out after {self.timeout}s ({self.credentials.endpoint})"
            ) from e

        return self._unwrap(result, context)

    def _unwrap(self, result: Dict[str, Any], context: str) -> Dict[str, Any]:
        response = result.get("Response") if isinstance(result, dict) else None
        if not isinstance(response, dict):
            raise UpstreamApplicationException(
                UpstreamErrorKind.EMPTY_RESPONSE,
                code=None,
                message="Response envelope missing from Hunyuan API reply",
                remediation=["Retry later", "Contact Tencent Cloud support if the problem persists"],
            )

        error = response.get("Error")
        if error:
            code = error.get("Code")
            kind = classify_error_code(code)
            request_id = response.get("RequestId")
            raise UpstreamApplicationException(
                kind,
                code=code,
                message=error.get("Message", ""),
                request_id=request_id,
                remediation=self.remediation_for(kind, request_id, context),
            )

        choices = response.get("Choices") or []
        if not choices:
            raise UpstreamApplicationException(
                UpstreamErrorKind.EMPTY_RESPONSE,
                code=None,
                message="Hunyuan API returned no result",
                request_id=response.get("RequestId"),
                remediation=["Retry later", "Contact Tencent Cloud support if the problem persists"],
            )
        return response

    def remediation_for(self, kind: UpstreamErrorKind, request_id: Optional[str], context: str) -> List[str]:
        if kind is UpstreamErrorKind.SERVICE_NOT_ACTIVATED:
            return [
                "Activate the Hunyuan service in the Tencent Cloud console",
                "Console: https://console.cloud.tencent.com/hunyuan",
                "Make sure the account balance is sufficient",
                f"Check the service region (current: {self.credentials.region})",
            ]
        if kind is UpstreamErrorKind.AUTH_FAILURE:
            return [
                f"Check that the SecretId is correct: {self.credentials.masked_secret_id}",
                "Check that the SecretKey is correct and has not expired",
                "Confirm the API key is allowed to use the Hunyuan service",
                "Check that the system clock is accurate",
            ]
        if kind is UpstreamErrorKind.RATE_LIMITED:
            return [
                "The call rate is too high, retry later",
                "Increase the interval between requests",
                "Request a higher API quota",
            ]
        if kind is UpstreamErrorKind.INVALID_PARAMETER:
            if context == "text":
                return [
                    "Check the request parameters",
                    "Check that the prompt length is reasonable",
                    "Verify the model name",
                ]
            return [
                "Check the request parameters",
                "Check the image format (supported: JPG, PNG, BMP, WEBP)",
                "Check the image size (max 5MB)",
                "Check that the prompt length is reasonable",
            ]
        if kind is UpstreamErrorKind.RESOURCE_NOT_FOUND:
            return [
                f"Check the model name (vision: {self.vision_model}, text: {self.text_model})",
                "Confirm the region supports this feature",
                "Verify the account has the required permissions",
            ]
        return [
            f"Record the request ID: {request_id}",
            "Contact Tencent Cloud support",
            "Provide the error details and the usage scenario",
        ]

    @staticmethod
    def _to_result(response: Dict[str, Any], images_analyzed: int = 0, images_dropped: int = 0) -> AnalysisResult:
        try:
            message = response["Choices"][0].get("Message") or {}
            content = message.get("Content") or ""
            usage = TokenUsage.from_response(response.get("Usage"))
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            raise UpstreamApplicationException(
                UpstreamErrorKind.EMPTY_RESPONSE,
                code=None,
                message=f"Malformed Hunyuan API reply: {e}",
                request_id=response.get("RequestId"),
                remediation=["Retry later", "Contact Tencent Cloud support if the problem persists"],
            ) from e
        return AnalysisResult(
            content=content,
            usage=usage,
            images_analyzed=images_analyzed,
            images_dropped=images_dropped,
        )

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------
    async def analyze_image(self, image_path: str, prompt: str = DEFAULT_IMAGE_PROMPT) -> AnalysisResult:
        """
        Analyze one image with the vision model.

        Raises:
            ResourceNotFoundException: If the image cannot be read.
            SizeLimitExceededException: If the image exceeds the upload limit.
            TransportException: On network or HTTP failures.
            UpstreamApplicationException: On an API error envelope.
        """
        logger.info(f"Analyzing image: {image_path}")
        data_uri = await self.encode_image(image_path)
        response = await self._call(self._vision_params(prompt, [data_uri]), context="image")
        result = self._to_result(response, images_analyzed=1)
        logger.info(
            f"Image analysis done - tokens: {result.usage.total_tokens} "
            f"(prompt: {result.usage.prompt_tokens}, completion: {result.usage.completion_tokens})"
        )
        return result

    async def analyze_image_batch(self, image_paths: List[str], prompt: str = DEFAULT_IMAGE_PROMPT) -> List[AnalysisResult]:
        """
        Analyze images sequentially, one call per image.

        A failing image yields a failure marker with zero usage in its slot;
        the remaining images are still processed. Output order matches input.
        """
        total = len(image_paths)
        results: List[AnalysisResult] = []
        logger.info(f"Starting batch analysis of {total} images")

        for index, image_path in enumerate(image_paths):
            logger.info(f"Batch progress: {index + 1}/{total} - {image_path}")
            try:
                results.append(await self.analyze_image(image_path, prompt))
            except VidlensException as e:
                logger.error(f"Image analysis failed for {image_path}: {e.message}")
                results.append(AnalysisResult.failure(e.message))

            if index < total - 1:
                await self._sleep(self.policy.request_interval_seconds)

        succeeded = sum(1 for result in results if result.succeeded)
        used = sum(result.usage.total_tokens for result in results)
        logger.info(f"Batch analysis done - succeeded: {succeeded}/{total}, total tokens: {used}")
        return results

    async def analyze_images_in_single_request(
        self, image_paths: List[str], prompt: str = DEFAULT_MULTI_IMAGE_PROMPT
    ) -> AnalysisResult:
        """
        Analyze up to ``policy.max_images_per_request`` images in one call.

        Extra images are not sent; the number left out is reported in
        ``images_dropped``.
        """
        if not image_paths:
            raise ValidationException("At least one image path is required", error_code="MISSING_PARAMETER")

        limit = self.policy.max_images_per_request
        selected = list(image_paths[:limit])
        dropped = len(image_paths) - len(selected)
        if dropped:
            logger.warning(f"Only the first {limit} of {len(image_paths)} images are sent; {dropped} dropped")

        data_uris = []
        for image_path in selected:
            data_uris.append(await self.encode_image(image_path))

        response = await self._call(self._vision_params(prompt, data_uris), context="image")
        result = self._to_result(response, images_analyzed=len(selected), images_dropped=dropped)
        logger.info(f"Multi-image analysis done - images: {len(selected)}, tokens: {result.usage.total_tokens}")
        return result

    async def generate_text(self, prompt: str, model: Optional[str] = None) -> AnalysisResult:
        """Single text-only completion."""
        model = model or self.text_model
        logger.info(f"Generating text with model: {model}")
        response = await self._call(self._text_params(prompt, model), context="text")
        result = self._to_result(response)
        logger.info(
            f"Text generation done - tokens: {result.usage.total_tokens} "
            f"(prompt: {result.usage.prompt_tokens}, completion: {result.usage.completion_tokens})"
        )
        return result
