"""Pyttsx3SpeechOutput — local text-to-speech on a dedicated worker thread."""
import logging
import queue
import threading
from typing import Any, Optional

import pyttsx3

from vision_glasses.constants import PYTTSX3_RATE
from vision_glasses.speech.output import SpeechOutput

logger = logging.getLogger(__name__)


def _drain(pending: queue.Queue) -> None:
    while True:
        try:
            pending.get_nowait()
        except queue.Empty:
            return


class Pyttsx3SpeechOutput(SpeechOutput):

    def __init__(self, engine: Optional[Any] = None) -> None:
        match engine:
            case None:
                self._engine = pyttsx3.init()
                self._engine.setProperty("rate", PYTTSX3_RATE)
            case e:
                self._engine = e
        # Holds at most the newest utterance; None stops the worker.
        self._pending: queue.Queue[Optional[str]] = queue.Queue()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def speak(self, text: str) -> None:
        match text.strip() if text else "":
            case "":
                return
            case t:
                _drain(self._pending)
                try:
                    self._engine.stop()
                except Exception as exc:
                    logger.debug("Speech stop failed: %s", exc)
                self._pending.put(t)

    def close(self) -> None:
        _drain(self._pending)
        self._pending.put(None)
        self._thread.join(timeout=2)

    def _run(self) -> None:
        while True:
            text = self._pending.get()
            match text:
                case None:
                    return
                case t:
                    try:
                        self._engine.say(t)
                        self._engine.runAndWait()
                    except Exception:
                        logger.exception("Speech playback failed")
