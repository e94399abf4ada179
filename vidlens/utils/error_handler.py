import asyncio
import functools
import json
from typing import Any, Callable, Dict, Optional, TypeVar

from loguru import logger

from ..exceptions import VidlensException
from ..providers.credentials import sanitize_arguments

T = TypeVar('T')


def log_exceptions(
    log_level: str = "ERROR",
    include_traceback: bool = True,
    custom_message: Optional[str] = None
):
    """
    Decorator to log exceptions and re-raise them.

    Vidlens exceptions are logged with their message only; anything else
    is unexpected and gets the traceback when ``include_traceback`` is set.
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        message = custom_message or f"Exception in {func.__name__}"

        def log(e: Exception):
            expected = isinstance(e, VidlensException)
            text = e.message if expected else str(e)
            logger.opt(exception=include_traceback and not expected).log(log_level, f"{message}: {text}")

        if asyncio.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs) -> T:
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    log(e)
                    raise
            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                log(e)
                raise
        return sync_wrapper

    return decorator


class ErrorHandler:
    """Centralized error formatting for user-visible failures."""

    @staticmethod
    def remediation_for(error: BaseException):
        if isinstance(error, VidlensException):
            return list(error.remediation)
        return list(VidlensException.remediation)

    @staticmethod
    def scrub_secrets(text: str, arguments: Optional[Dict[str, Any]]) -> str:
        """Replace raw credential values that leaked into a message."""
        raw = arguments or {}
        masked = sanitize_arguments(raw)
        for key in ("secret_key", "secretKey", "secret_id", "secretId"):
            value = raw.get(key)
            if value and str(value) in text:
                text = text.replace(str(value), str(masked[key]))
        return text

    @staticmethod
    def format_error(error: BaseException, tool_name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
        """
        Render a failure for the caller: summary, sanitized arguments and remediation.

        Secret keys never appear in the output and secret ids only as a masked suffix.
        """
        summary = error.message if isinstance(error, VidlensException) else str(error)
        summary = ErrorHandler.scrub_secrets(summary, arguments)

        context = "\n\n[Error context]"
        context += f"\n- Tool: {tool_name}"
        context += f"\n- Arguments: {json.dumps(sanitize_arguments(arguments), indent=2, ensure_ascii=False, default=str)}"

        suggestions = "\n\n[Suggestions]"
        for index, step in enumerate(ErrorHandler.remediation_for(error), start=1):
            suggestions += f"\n{index}. {step}"

        return f"❌ Operation failed: {summary}{context}{suggestions}"

