"""
Timestamp selection for frame extraction.

Only the uniform strategy is computed natively. Keyframe and scene-change
selection are accepted for compatibility and produce the uniform schedule.
"""

from typing import List, Optional, Union

from loguru import logger

from ...exceptions import ValidationException
from ...models import FrameStrategy

FALLBACK_DURATION_SECONDS = 60.0
LARGE_REQUEST_WARNING = 100


def uniform_timestamps(duration: float, max_frames: int) -> List[float]:
    """
    ``max_frames`` timestamps evenly spaced strictly inside ``(0, duration)``.

    The clip is divided into ``max_frames + 1`` equal intervals and the
    interior boundaries are returned, so the first and last instants are
    never sampled.
    """
    interval = duration / (max_frames + 1)
    return [interval * (i + 1) for i in range(max_frames)]


def coerce_strategy(strategy: Union[str, FrameStrategy]) -> FrameStrategy:
    if isinstance(strategy, FrameStrategy):
        return strategy
    try:
        return FrameStrategy(str(strategy).strip().lower())
    except ValueError as e:
        supported = ", ".join(s.value for s in FrameStrategy)
        raise ValidationException(
            f"Unsupported extraction strategy: {strategy}. Supported strategies: {supported}",
            error_code="INVALID_STRATEGY",
        ) from e


class FrameSelector:
    """Turns a duration, frame budget and strategy into an ordered list of timestamps."""

    def __init__(
        self,
        fallback_duration: float = FALLBACK_DURATION_SECONDS,
        large_request_warning: int = LARGE_REQUEST_WARNING,
    ):
        self.fallback_duration = fallback_duration
        self.large_request_warning = large_request_warning

    def select(
        self,
        duration: Optional[float],
        max_frames: int,
        strategy: Union[str, FrameStrategy] = FrameStrategy.UNIFORM,
    ) -> List[float]:
        """
        Compute frame timestamps in seconds.

        Args:
            duration: Clip length in seconds; ``None`` or non-positive means unknown.
            max_frames: Number of timestamps wanted, must be positive.
            strategy: uniform, keyframe or scene_change.

        Returns:
            Strictly increasing timestamps, all inside ``(0, duration)``.

        Raises:
            ValidationException: If ``max_frames`` is not positive or the strategy is unknown.
        """
        if max_frames <= 0:
            raise ValidationException(
                f"max_frames must be positive, got {max_frames}",
                error_code="INVALID_MAX_FRAMES",
            )
        strategy = coerce_strategy(strategy)

        if max_frames > self.large_request_warning:
            logger.warning(f"Large frame request: {max_frames} frames, extraction may be slow")

        if duration is None or duration <= 0:
            logger.warning(f"Video duration unknown, assuming {self.fallback_duration}s")
            duration = self.fallback_duration

        if strategy is not FrameStrategy.UNIFORM:
            logger.warning(f"Strategy '{strategy.value}' is not implemented natively, using uniform sampling")

        timestamps = uniform_timestamps(duration, max_frames)
        logger.debug(f"Selected {len(timestamps)} timestamps over {duration:.2f}s ({strategy.value})")
        return timestamps


def compute_timestamps(
    duration: Optional[float],
    max_frames: int,
    strategy: Union[str, FrameStrategy] = FrameStrategy.UNIFORM,
) -> List[float]:
    """Module-level shortcut for ``FrameSelector().select``."""
    return FrameSelector().select(duration, max_frames, strategy)
