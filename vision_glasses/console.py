"""Console — interactive command loop standing in for the demo's buttons."""
import asyncio
import logging
from collections.abc import Awaitable

from rich.console import Console as RichConsole

from vision_glasses.analysis import AnalysisRequestHandler, AnalysisResult
from vision_glasses.config import TransportMode, parse_bool
from vision_glasses.constants import (
    CMD_CALL,
    CMD_ENDPOINT,
    CMD_FORMDATA,
    CMD_HELP,
    CMD_IMAGE,
    CMD_LIVE,
    CMD_MOCK,
    CMD_QUIT,
    CMD_RUN,
    CMD_STATUS,
    CMD_TEST,
    CONSOLE_PROMPT,
    MSG_BYE,
    MSG_COMMAND_FAILED,
    MSG_ENDPOINT_CLEARED,
    MSG_ENDPOINT_SET,
    MSG_FORMDATA_SET,
    MSG_FORMDATA_USAGE,
    MSG_HELP,
    MSG_IMAGE_READ_FAILED,
    MSG_IMAGE_USAGE,
    MSG_MODE_SET,
    MSG_RESULT,
    MSG_RESULT_ERROR,
    MSG_STATUS,
    MSG_TEST_LINE,
    MSG_UNKNOWN_COMMAND,
    TEST_PAYLOAD,
)
from vision_glasses.image_source import FileImageSource, ImageSource

logger = logging.getLogger(__name__)


def parse_command(line: str) -> tuple[str, str] | None:
    """Split '/<cmd> <args>' → (cmd, args). Blank lines give None."""
    match line.strip().split(None, 1):
        case []:
            return None
        case [cmd]:
            return (cmd.lstrip("/").lower(), "")
        case [cmd, args]:
            return (cmd.lstrip("/").lower(), args.strip())


class Console:

    def __init__(
        self, handler: AnalysisRequestHandler, output: RichConsole | None = None
    ) -> None:
        self._handler = handler
        self._out = output or RichConsole()
        self._tasks: set[asyncio.Task] = set()

    async def run(self) -> None:
        self._print(MSG_HELP)
        while True:
            try:
                line = await asyncio.to_thread(input, CONSOLE_PROMPT)
            except EOFError:
                break
            try:
                keep_going = await self.handle(line)
            except Exception as exc:
                logger.exception("Console command failed: %r", line)
                self._print(MSG_COMMAND_FAILED % exc)
                continue
            match keep_going:
                case True:
                    continue
                case False:
                    break
        await self.wait_idle()

    async def handle(self, line: str) -> bool:
        """Run one command line. Returns False when the loop should stop."""
        endpoint = self._handler.endpoint
        match parse_command(line):
            case None:
                pass
            case (cmd, _) if cmd == CMD_HELP:
                self._print(MSG_HELP)
            case (cmd, _) if cmd == CMD_STATUS:
                self._print(self.status_text())
            case (cmd, _) if cmd in (CMD_MOCK, CMD_LIVE):
                endpoint.set_mock(cmd == CMD_MOCK)
                self._print(MSG_MODE_SET % endpoint.mode.value)
            case (cmd, url) if cmd == CMD_ENDPOINT:
                endpoint.set_url(url)
                self._print(
                    MSG_ENDPOINT_SET % endpoint.url if endpoint.url else MSG_ENDPOINT_CLEARED
                )
            case (cmd, flag) if cmd == CMD_FORMDATA:
                try:
                    endpoint.set_form_data(parse_bool(CMD_FORMDATA, flag))
                    self._print(MSG_FORMDATA_SET % flag.lower())
                except ValueError:
                    self._print(MSG_FORMDATA_USAGE)
            case (cmd, _) if cmd == CMD_RUN:
                self._spawn(self._handler.analyze(TEST_PAYLOAD, force_mock=True))
            case (cmd, _) if cmd == CMD_CALL:
                self._spawn(self._handler.analyze(TEST_PAYLOAD, force_mock=False))
            case (cmd, "") if cmd == CMD_IMAGE:
                self._print(MSG_IMAGE_USAGE)
            case (cmd, path) if cmd == CMD_IMAGE:
                await self._analyze_file(path)
            case (cmd, _) if cmd == CMD_TEST:
                await self._run_tests()
            case (cmd, _) if cmd == CMD_QUIT:
                self._print(MSG_BYE)
                return False
            case (cmd, _):
                self._print(MSG_UNKNOWN_COMMAND % cmd)
        return True

    async def wait_idle(self) -> None:
        if self._tasks:
            await asyncio.gather(*list(self._tasks))

    def status_text(self) -> str:
        endpoint, state = self._handler.endpoint, self._handler.state
        return MSG_STATUS % (
            endpoint.mode.value,
            endpoint.url or "not configured",
            "on" if endpoint.transport_mode is TransportMode.FORM_DATA else "off",
            "yes" if state.processing else "no",
            state.result_text or "No result yet",
            state.last_error or "none",
        )

    # ── helpers ───────────────────────────────────────────────────────────────

    def _print(self, text: str) -> None:
        self._out.print(text, markup=False, highlight=False)

    async def _analyze_file(self, path: str) -> None:
        try:
            source: ImageSource = FileImageSource(path)
            image_data = await asyncio.to_thread(source.read)
        except (OSError, ValueError, RuntimeError) as exc:
            self._print(MSG_IMAGE_READ_FAILED % exc)
            return
        self._spawn(self._handler.analyze(image_data))

    def _spawn(self, analysis: Awaitable[AnalysisResult]) -> None:
        task = asyncio.create_task(self._report(analysis))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.debug("Analysis started (%d in flight)", len(self._tasks))

    async def _report(self, analysis: Awaitable[AnalysisResult]) -> None:
        result = await analysis
        match result.request_id == self._handler.state.latest_request_id:
            case False:
                return
            case True:
                pass
        self._print(MSG_RESULT % result.spoken_text)
        match result.error_detail:
            case None:
                pass
            case detail:
                self._print(MSG_RESULT_ERROR % detail)

    async def _run_tests(self) -> None:
        results = await self._handler.run_self_tests()
        list(map(
            lambda r: self._print(MSG_TEST_LINE % ("PASS" if r.passed else "FAIL", r.name, r.output)),
            results,
        ))
