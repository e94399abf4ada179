"""
Data models shared by the Hunyuan provider and the video pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

FAILURE_MARKER = "❌ Analysis failed"


class FrameStrategy(str, Enum):
    """Timestamp selection strategies."""
    UNIFORM = "uniform"
    KEYFRAME = "keyframe"
    SCENE_CHANGE = "scene_change"


@dataclass(frozen=True)
class TokenUsage:
    """Token counts billed for one or more API calls."""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        return TokenUsage(
            prompt_tokens=self.prompt_tokens + other.prompt_tokens,
            completion_tokens=self.completion_tokens + other.completion_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
        )

    @classmethod
    def from_response(cls, usage: Optional[dict]) -> "TokenUsage":
        usage = usage or {}
        return cls(
            prompt_tokens=int(usage.get("PromptTokens") or 0),
            completion_tokens=int(usage.get("CompletionTokens") or 0),
            total_tokens=int(usage.get("TotalTokens") or 0),
        )


@dataclass(frozen=True)
class AnalysisResult:
    """Text returned by one API call, or a failure marker inside a batch."""
    content: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    error: Optional[str] = None
    images_analyzed: int = 0
    images_dropped: int = 0

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error: str) -> "AnalysisResult":
        return cls(content=f"{FAILURE_MARKER}: {error}", error=error)


def total_usage(results: List[AnalysisResult]) -> TokenUsage:
    """Sum of usage over results; failure markers carry zero usage."""
    usage = TokenUsage()
    for result in results:
        if result.succeeded:
            usage = usage + result.usage
    return usage


@dataclass(frozen=True)
class VideoMetadata:
    """Snapshot of one probe call."""
    duration_seconds: float
    width: int
    height: int
    frame_rate: float
    container_format: str

    @property
    def frame_count(self) -> int:
        return int(self.duration_seconds * self.frame_rate)


@dataclass(frozen=True)
class ExtractedFrame:
    """A frame image written to disk by the extractor."""
    path: str
    timestamp_seconds: float
    sequence_index: int


@dataclass(frozen=True)
class CleanupReport:
    removed: int
    failed: int


@dataclass(frozen=True)
class VideoAnalysisResult:
    summary: str
    usage: TokenUsage
    frame_count: int
    timestamps: List[float]


@dataclass(frozen=True)
class ScriptResult:
    """Shooting script plus the analysis it was written from."""
    script: str
    analysis: str
    analysis_usage: TokenUsage
    script_usage: TokenUsage
    images_failed: int = 0

    @property
    def usage(self) -> TokenUsage:
        return self.analysis_usage + self.script_usage
