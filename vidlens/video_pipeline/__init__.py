from .core.frame_extractor import FrameExtractor
from .core.frame_selector import FrameSelector, compute_timestamps
from .core.video_processor import VideoProcessor

__all__ = ["FrameExtractor", "FrameSelector", "compute_timestamps", "VideoProcessor"]
