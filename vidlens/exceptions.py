from enum import Enum
from typing import Dict, List, Optional


class VidlensException(Exception):
    """Base exception for the vidlens framework."""

    remediation: List[str] = [
        "Check that all input parameters are correct",
        "Review the detailed error message to locate the problem",
        "If the problem persists, contact support with the error details",
    ]

    def __init__(self, message: str, error_code: str = None, details: Dict = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ConfigurationException(VidlensException):
    """Raised when configuration or credentials are missing or invalid."""

    remediation = [
        "Set HUNYUAN_SECRET_ID and HUNYUAN_SECRET_KEY in the environment or .env file",
        "Or pass secret_id/secret_key with the call",
        "API keys can be created at https://console.cloud.tencent.com/cam/capi",
    ]


class ValidationException(VidlensException):
    """Raised when input validation fails."""

    remediation = [
        "Check that every required parameter is present",
        "Check parameter types and value ranges",
    ]


class SizeLimitExceededException(ValidationException):
    """Raised when an image is too large to be sent upstream."""

    remediation = [
        "Use images smaller than the upload limit (5MB by default)",
        "Re-encode or downscale the image before analysis",
    ]


class ResourceNotFoundException(VidlensException):
    """Raised when a referenced file does not exist or cannot be read."""

    remediation = [
        "Check that the file path is correct",
        "Make sure the file exists",
        "Check that file permissions allow reading",
    ]


class ExternalToolFailure(str, Enum):
    """Failure categories for the ffmpeg/ffprobe subprocesses."""

    NOT_INSTALLED = "not_installed"
    INVALID_DATA = "invalid_data"
    PERMISSION = "permission"
    TIMEOUT = "timeout"
    NO_VIDEO_STREAM = "no_video_stream"
    INVALID_DURATION = "invalid_duration"
    INVALID_SEEK = "invalid_seek"
    DISK_FULL = "disk_full"
    NO_FRAMES = "no_frames"
    UNKNOWN = "unknown"


_TOOL_REMEDIATION: Dict[ExternalToolFailure, List[str]] = {
    ExternalToolFailure.NOT_INSTALLED: [
        "Install FFmpeg and make sure ffmpeg and ffprobe are on PATH",
        "Run `ffmpeg -version` to confirm the installation",
    ],
    ExternalToolFailure.INVALID_DATA: [
        "Check that the video file is not corrupted",
        "Confirm the container format is supported by FFmpeg",
        "Try re-encoding the video or testing with another format",
    ],
    ExternalToolFailure.PERMISSION: [
        "Check read permission on the video file",
        "Check write permission on the output directory",
    ],
    ExternalToolFailure.TIMEOUT: [
        "The decoder did not respond in time; retry later",
        "Check the video file for damage or unusual encoding",
    ],
    ExternalToolFailure.NO_VIDEO_STREAM: [
        "The file has no video stream (it may be audio only)",
        "Provide a file that contains a video track",
    ],
    ExternalToolFailure.INVALID_DURATION: [
        "The video reports a non-positive duration and is probably damaged",
        "Re-export or re-encode the video",
    ],
    ExternalToolFailure.INVALID_SEEK: [
        "The requested position may lie beyond the end of the video",
        "Check the video file for damage",
    ],
    ExternalToolFailure.DISK_FULL: [
        "Free up disk space on the output volume",
        "Choose a different output directory",
    ],
    ExternalToolFailure.NO_FRAMES: [
        "Check the FFmpeg configuration",
        "Check that the video file is not damaged",
        "Check free disk space",
        "Check write permission on the output directory",
    ],
}


class ExternalToolException(VidlensException):
    """Raised when the ffmpeg/ffprobe subprocess fails."""

    def __init__(
        self,
        message: str,
        kind: ExternalToolFailure = ExternalToolFailure.UNKNOWN,
        details: Dict = None,
    ):
        super().__init__(message, error_code=f"EXTERNAL_TOOL_{kind.name}", details=details)
        self.kind = kind

    @property
    def remediation(self) -> List[str]:
        return _TOOL_REMEDIATION.get(self.kind, VidlensException.remediation)


class TransportException(VidlensException):
    """Raised when the remote API cannot be reached or answers with a non-2xx status."""

    remediation = [
        "Check the network connection",
        "Make sure firewalls or proxies do not block the API endpoint",
        "Check the configured endpoint and region",
        "Retry later",
    ]

    def __init__(self, message: str, status: Optional[int] = None, body: Optional[str] = None):
        super().__init__(
            message,
            error_code="TRANSPORT_ERROR",
            details={"status": status, "body": body},
        )
        self.status = status
        self.body = body


class UpstreamErrorKind(str, Enum):
    """Classification of the error envelope returned by the Hunyuan API."""

    SERVICE_NOT_ACTIVATED = "service_not_activated"
    AUTH_FAILURE = "auth_failure"
    RATE_LIMITED = "rate_limited"
    INVALID_PARAMETER = "invalid_parameter"
    RESOURCE_NOT_FOUND = "resource_not_found"
    EMPTY_RESPONSE = "empty_response"
    UNKNOWN = "unknown"


class UpstreamApplicationException(VidlensException):
    """Raised when the Hunyuan API returns a structured error envelope."""

    def __init__(
        self,
        kind: UpstreamErrorKind,
        code: Optional[str],
        message: str,
        request_id: Optional[str] = None,
        remediation: Optional[List[str]] = None,
    ):
        summary = (
            f"Hunyuan API error:\n"
            f"- Error code: {code}\n"
            f"- Error message: {message}\n"
            f"- Request ID: {request_id}"
        )
        super().__init__(
            summary,
            error_code=code,
            details={"kind": kind.value, "request_id": request_id},
        )
        self.kind = kind
        self.code = code
        self.upstream_message = message
        self.request_id = request_id
        self.remediation = remediation or [
            f"Record the request ID: {request_id}",
            "Contact Tencent Cloud support",
            "Provide the error details and the usage scenario",
        ]
