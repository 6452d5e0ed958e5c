"""SpeechOutput sinks: logging fallback, pyttsx3 worker, backend selection."""
import logging
import threading
from unittest.mock import MagicMock, patch

from vision_glasses.speech.factory import create_speech_output
from vision_glasses.speech.output import LoggingSpeechOutput, SpeechOutput
from vision_glasses.speech.pyttsx3 import Pyttsx3SpeechOutput


def make_engine(spoken: list[str], done: threading.Event, until: str) -> MagicMock:
    engine = MagicMock()
    engine.say.side_effect = spoken.append

    def _run_and_wait():
        if spoken and spoken[-1] == until:
            done.set()

    engine.runAndWait.side_effect = _run_and_wait
    return engine


# ── LoggingSpeechOutput ───────────────────────────────────────────────────────


def test_logging_sink_implements_abc():
    assert issubclass(LoggingSpeechOutput, SpeechOutput)


def test_logging_sink_records_text(caplog):
    with caplog.at_level(logging.INFO, logger="vision_glasses.speech.output"):
        LoggingSpeechOutput().speak("chair to your right")

    assert "TTS (mock): chair to your right" in caplog.text


def test_logging_sink_ignores_empty_text(caplog):
    with caplog.at_level(logging.INFO, logger="vision_glasses.speech.output"):
        LoggingSpeechOutput().speak("   ")

    assert caplog.text == ""


# ── Pyttsx3SpeechOutput ───────────────────────────────────────────────────────


def test_pyttsx3_speaks_on_worker_thread():
    spoken, done = [], threading.Event()
    sink = Pyttsx3SpeechOutput(engine=make_engine(spoken, done, until="person ahead"))

    sink.speak("person ahead")

    assert done.wait(timeout=2)
    sink.close()
    assert spoken == ["person ahead"]


def test_pyttsx3_new_utterance_stops_current_one():
    spoken, done = [], threading.Event()
    engine = make_engine(spoken, done, until="second")
    sink = Pyttsx3SpeechOutput(engine=engine)

    sink.speak("first")
    sink.speak("second")

    assert engine.stop.call_count == 2
    assert done.wait(timeout=2)
    sink.close()
    assert spoken[-1] == "second"


def test_pyttsx3_ignores_empty_text():
    engine = MagicMock()
    sink = Pyttsx3SpeechOutput(engine=engine)

    sink.speak("")
    sink.close()

    engine.stop.assert_not_called()
    engine.say.assert_not_called()


def test_pyttsx3_playback_error_keeps_worker_alive():
    spoken, done = [], threading.Event()
    engine = make_engine(spoken, done, until="second")
    failures = iter([RuntimeError("driver busy")])

    def _say(text):
        spoken.append(text)
        error = next(failures, None)
        if error is not None:
            raise error

    engine.say.side_effect = _say
    sink = Pyttsx3SpeechOutput(engine=engine)

    sink.speak("first")
    # let the worker hit the failure before the next utterance arrives
    threading.Event().wait(0.1)
    sink.speak("second")

    assert done.wait(timeout=2)
    sink.close()
    assert spoken == ["first", "second"]


def test_pyttsx3_close_stops_worker():
    sink = Pyttsx3SpeechOutput(engine=MagicMock())

    sink.close()

    assert not sink._thread.is_alive()


def test_pyttsx3_default_engine_uses_library():
    engine = MagicMock()

    with patch("vision_glasses.speech.pyttsx3.pyttsx3.init", return_value=engine) as init:
        sink = Pyttsx3SpeechOutput()
        sink.close()

    init.assert_called_once()
    engine.setProperty.assert_called_once_with("rate", 175)


# ── create_speech_output ──────────────────────────────────────────────────────


def test_factory_log_backend():
    assert isinstance(create_speech_output("log"), LoggingSpeechOutput)


def test_factory_pyttsx3_backend():
    with patch("vision_glasses.speech.pyttsx3.pyttsx3.init", return_value=MagicMock()):
        sink = create_speech_output("pyttsx3")

    assert isinstance(sink, Pyttsx3SpeechOutput)
    sink.close()


def test_factory_falls_back_when_engine_unavailable(caplog):
    with patch(
        "vision_glasses.speech.pyttsx3.pyttsx3.init",
        side_effect=OSError("libespeak not found"),
    ):
        with caplog.at_level(logging.WARNING):
            sink = create_speech_output("pyttsx3")

    assert isinstance(sink, LoggingSpeechOutput)
    assert "libespeak not found" in caplog.text
