from .llm_provider import LLMProvider
from .vision_provider import VisionProvider

__all__ = [
    'LLMProvider',
    'VisionProvider',
]
