"""Helpers shared by the MCP tool modules."""

from typing import Optional

from vidlens.providers import HunyuanClient, provider_factory

from ..config import get_startup_credentials


def build_client(
    secret_id: Optional[str] = None,
    secret_key: Optional[str] = None,
    region: Optional[str] = None,
) -> HunyuanClient:
    """Client for one tool call, resolving env > call parameters > startup arguments."""
    return provider_factory.create_hunyuan_client(
        secret_id=secret_id,
        secret_key=secret_key,
        region=region,
        startup=get_startup_credentials(),
    )


def format_usage(usage) -> str:
    return (
        f"{usage.total_tokens} (prompt: {usage.prompt_tokens}, "
        f"completion: {usage.completion_tokens})"
    )


def format_duration(seconds: float) -> str:
    minutes, rest = divmod(int(seconds), 60)
    return f"{seconds:.2f} s ({minutes} min {rest} s)"


def format_script_result(header: str, result, analysis_label: str) -> str:
    return (
        f"{header}\n\n"
        f"🎬 Shooting script:\n{result.script}\n\n"
        f"🔍 {analysis_label}:\n{result.analysis}\n\n"
        f"📊 Tokens:\n"
        f"- Analysis: {result.analysis_usage.total_tokens}\n"
        f"- Script: {result.script_usage.total_tokens}\n"
        f"- Total: {result.usage.total_tokens}"
    )
