"""ImageSource — producers of base64 image payloads."""
import base64
from abc import ABC, abstractmethod
from pathlib import Path


class ImageSource(ABC):
    @abstractmethod
    def read(self) -> str:
        """Return the image as base64 text. Raises OSError when it cannot be read."""
        ...


class FileImageSource(ImageSource):

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> str:
        return base64.standard_b64encode(self._path.read_bytes()).decode()
