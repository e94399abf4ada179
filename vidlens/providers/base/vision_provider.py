from abc import ABC, abstractmethod
from typing import List

from ...models import AnalysisResult


class VisionProvider(ABC):
    """Abstract base class for vision providers."""

    @abstractmethod
    async def analyze_image(self, image_path: str, prompt: str) -> AnalysisResult:
        """Analyze a single image."""
        pass

    @abstractmethod
    async def analyze_image_batch(self, image_paths: List[str], prompt: str) -> List[AnalysisResult]:
        """Analyze images one call at a time, isolating per-image failures."""
        pass

    @abstractmethod
    async def analyze_images_in_single_request(self, image_paths: List[str], prompt: str) -> AnalysisResult:
        """Analyze several images in one call."""
        pass
