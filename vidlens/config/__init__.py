from .settings import FrameExtractionConfig, HunyuanConfig, LoggingConfig, VidlensConfig

__all__ = ["FrameExtractionConfig", "HunyuanConfig", "LoggingConfig", "VidlensConfig"]
