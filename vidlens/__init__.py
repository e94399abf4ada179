"""
vidlens: video frame extraction and Tencent Hunyuan vision analysis.
"""

__version__ = "1.0.0"
