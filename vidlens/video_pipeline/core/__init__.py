from .decoder import FfmpegVideoDecoder, VideoDecoder
from .frame_extractor import FrameExtractor
from .frame_selector import FrameSelector, compute_timestamps, uniform_timestamps
from .video_processor import VideoProcessor

__all__ = [
    "FfmpegVideoDecoder",
    "VideoDecoder",
    "FrameExtractor",
    "FrameSelector",
    "compute_timestamps",
    "uniform_timestamps",
    "VideoProcessor",
]
