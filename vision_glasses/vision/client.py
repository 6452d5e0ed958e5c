"""VisionClient — abstract base for hosted image-description backends."""
from abc import ABC, abstractmethod


class VisionClient(ABC):
    name: str = "vision"

    @abstractmethod
    async def analyze(self, image_base64: str, prompt: str | None = None) -> str:
        """Describe a base64 image for spoken output. Raises on failure."""
        ...
