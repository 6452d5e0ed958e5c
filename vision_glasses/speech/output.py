"""SpeechOutput — abstract sink for spoken text."""
import logging
from abc import ABC, abstractmethod

from vision_glasses.constants import MSG_TTS_MOCK

logger = logging.getLogger(__name__)


class SpeechOutput(ABC):
    @abstractmethod
    def speak(self, text: str) -> None:
        """Speak text, cutting off whatever is currently playing. Never queues."""
        ...

    def close(self) -> None:
        pass


class LoggingSpeechOutput(SpeechOutput):
    """Sink for environments with no audio: the text is only logged."""

    def speak(self, text: str) -> None:
        match text.strip() if text else "":
            case "":
                pass
            case t:
                logger.info(MSG_TTS_MOCK, t)
