from abc import ABC, abstractmethod
from typing import Optional

from ...models import AnalysisResult


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    async def generate_text(self, prompt: str, model: Optional[str] = None) -> AnalysisResult:
        """Generate a text completion for a single user prompt."""
        pass
