from .error_handler import ErrorHandler, log_exceptions
from .validation import FrameRequest, ScriptOptions, parse_request, require_path

__all__ = [
    "ErrorHandler",
    "log_exceptions",
    "FrameRequest",
    "ScriptOptions",
    "parse_request",
    "require_path",
]
