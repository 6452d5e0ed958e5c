"""Entry point — wires Config → SpeechOutput → AnalysisRequestHandler → Console."""
import asyncio
import logging

from rich.logging import RichHandler

from vision_glasses.analysis import AnalysisRequestHandler
from vision_glasses.config import Config
from vision_glasses.console import Console
from vision_glasses.constants import MSG_APP_STARTING
from vision_glasses.speech.factory import create_speech_output


def setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True))


def main() -> None:
    config = Config.from_env()
    setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(MSG_APP_STARTING)

    speech = create_speech_output(config.speech_backend)
    handler = AnalysisRequestHandler(
        config.endpoint_config(),
        speech,
        mock_delay=config.mock_delay,
        token=config.endpoint_token,
    )
    try:
        asyncio.run(Console(handler).run())
    finally:
        speech.close()


if __name__ == "__main__":
    main()
