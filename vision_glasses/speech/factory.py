"""Pick a SpeechOutput for the configured backend."""
import logging

from vision_glasses.constants import MSG_TTS_UNAVAILABLE, SPEECH_BACKEND_LOG
from vision_glasses.speech.output import LoggingSpeechOutput, SpeechOutput
from vision_glasses.speech.pyttsx3 import Pyttsx3SpeechOutput

logger = logging.getLogger(__name__)


def create_speech_output(backend: str) -> SpeechOutput:
    """Return the requested sink, or the logging sink when no audio is available."""
    match backend:
        case b if b == SPEECH_BACKEND_LOG:
            return LoggingSpeechOutput()
        case _:
            try:
                return Pyttsx3SpeechOutput()
            except Exception as exc:
                logger.warning(MSG_TTS_UNAVAILABLE, exc)
                return LoggingSpeechOutput()
