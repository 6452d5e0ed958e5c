"""AnalysisRequestHandler — turns an image (or the mock flag) into spoken text.

Three mutually exclusive paths, tried in order: mock, unconfigured endpoint,
live endpoint. Every path returns an AnalysisResult; nothing is raised to the
caller. Each call carries its own request id and only the most recently
started request may update the shared state or reach the speech sink.
"""
import asyncio
import json
import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from itertools import count
from typing import Any, Optional

import aiohttp

from vision_glasses.config import AnalysisMode, EndpointConfig, TransportMode
from vision_glasses.constants import (
    ANALYSIS_PROMPT,
    BEARER_PREFIX,
    FIELD_IMAGE,
    FIELD_PROMPT,
    MOCK_DELAY_SECONDS,
    MOCK_PREFIX,
    MSG_ANALYSIS_FAILED,
    MSG_CALLING_ENDPOINT,
    MSG_ENDPOINT_OK,
    MSG_MOCK_DESCRIPTION,
    MSG_NO_DESCRIPTION,
    MSG_NO_ENDPOINT,
    MSG_STALE_RESULT,
    NO_ENDPOINT_PHRASE,
    SPOKEN_TEXT_FIELDS,
    TEST_NAME_MOCK,
    TEST_NAME_NO_ENDPOINT,
    TEST_PAYLOAD,
)
from vision_glasses.errors import EndpointError
from vision_glasses.speech.output import SpeechOutput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisRequest:
    request_id: int
    image_data: str
    mode: AnalysisMode
    prompt: Optional[str] = None


@dataclass(frozen=True)
class AnalysisResult:
    spoken_text: str
    succeeded: bool
    request_id: int
    error_detail: Optional[str] = None


@dataclass
class HandlerState:
    processing: bool = False
    result_text: str = ""
    last_error: Optional[str] = None
    latest_request_id: int = 0


@dataclass(frozen=True)
class SelfTestResult:
    name: str
    passed: bool
    output: str


# ── pure helpers (module-level so tests can import them directly) ──────────────


def extract_spoken_text(
    payload: Any, fields: tuple[str, ...] = SPOKEN_TEXT_FIELDS
) -> str:
    """First non-empty string among the candidate fields, else the default."""
    match payload:
        case Mapping():
            return next(
                (v for v in map(payload.get, fields) if isinstance(v, str) and v),
                MSG_NO_DESCRIPTION,
            )
        case _:
            return MSG_NO_DESCRIPTION


def build_post_kwargs(
    request: AnalysisRequest, transport: TransportMode, token: Optional[str] = None
) -> dict[str, Any]:
    """Keyword arguments for ClientSession.post() carrying the image and prompt."""
    headers = {"Authorization": BEARER_PREFIX + token} if token else {}
    fields = {FIELD_IMAGE: request.image_data or "", FIELD_PROMPT: request.prompt or ""}
    match transport:
        case TransportMode.FORM_DATA:
            form = aiohttp.FormData()
            # an explicit content type makes aiohttp send multipart, not urlencoded
            list(map(
                lambda kv: form.add_field(kv[0], kv[1], content_type="text/plain"),
                fields.items(),
            ))
            return {"data": form, "headers": headers}
        case _:
            return {"json": fields, "headers": headers}


# ── handler ───────────────────────────────────────────────────────────────────


class AnalysisRequestHandler:

    def __init__(
        self,
        endpoint: EndpointConfig,
        speech: SpeechOutput,
        *,
        mock_delay: float = MOCK_DELAY_SECONDS,
        token: Optional[str] = None,
        prompt: str = ANALYSIS_PROMPT,
    ) -> None:
        self._endpoint = endpoint
        self._speech = speech
        self._mock_delay = mock_delay
        self._token = token
        self._prompt = prompt
        self._ids = count(1)
        self.state = HandlerState()

    @property
    def endpoint(self) -> EndpointConfig:
        return self._endpoint

    async def analyze(self, image_data: str, force_mock: Optional[bool] = None) -> AnalysisResult:
        use_mock = force_mock if isinstance(force_mock, bool) else self._endpoint.use_mock
        url = (self._endpoint.url or "").strip()
        request = AnalysisRequest(
            request_id=next(self._ids),
            image_data=image_data,
            mode=AnalysisMode.MOCK if use_mock else AnalysisMode.LIVE,
            prompt=None if use_mock else self._prompt,
        )

        match (request.mode, url):
            case (AnalysisMode.MOCK, _):
                self._begin(request, processing=True)
                await asyncio.sleep(self._mock_delay)
                result = AnalysisResult(
                    spoken_text=MSG_MOCK_DESCRIPTION,
                    succeeded=True,
                    request_id=request.request_id,
                )
            case (AnalysisMode.LIVE, ""):
                self._begin(request, processing=False)
                result = AnalysisResult(
                    spoken_text=MSG_NO_ENDPOINT,
                    succeeded=True,
                    request_id=request.request_id,
                )
            case (AnalysisMode.LIVE, endpoint_url):
                self._begin(request, processing=True)
                result = await self._call_endpoint(request, endpoint_url)

        self._finish(result)
        return result

    async def run_self_tests(self) -> list[SelfTestResult]:
        """The two built-in checks. Uses a scratch endpoint so no network is touched."""
        scratch = AnalysisRequestHandler(
            EndpointConfig(), self._speech, mock_delay=self._mock_delay
        )
        mock = await scratch.analyze(TEST_PAYLOAD, force_mock=True)
        no_endpoint = await scratch.analyze(TEST_PAYLOAD, force_mock=False)
        return [
            SelfTestResult(
                name=TEST_NAME_MOCK,
                passed=mock.succeeded and mock.spoken_text.startswith(MOCK_PREFIX),
                output=mock.spoken_text,
            ),
            SelfTestResult(
                name=TEST_NAME_NO_ENDPOINT,
                passed=NO_ENDPOINT_PHRASE in no_endpoint.spoken_text,
                output=no_endpoint.spoken_text,
            ),
        ]

    # ── state bookkeeping ─────────────────────────────────────────────────────

    def _begin(self, request: AnalysisRequest, *, processing: bool) -> None:
        self.state.latest_request_id = request.request_id
        self.state.last_error = None
        self.state.result_text = ""
        if processing:
            self.state.processing = True

    def _finish(self, result: AnalysisResult) -> None:
        latest = self.state.latest_request_id
        match result.request_id == latest:
            case False:
                logger.info(MSG_STALE_RESULT, result.request_id, latest)
                return
            case True:
                pass
        self.state.processing = False
        self.state.result_text = result.spoken_text
        self.state.last_error = result.error_detail
        self._speak(result.spoken_text)

    def _speak(self, text: str) -> None:
        match text:
            case "":
                return
            case _:
                try:
                    self._speech.speak(text)
                except Exception as exc:
                    logger.warning("TTS error: %s", exc)

    # ── live endpoint ─────────────────────────────────────────────────────────

    async def _call_endpoint(self, request: AnalysisRequest, url: str) -> AnalysisResult:
        transport = self._endpoint.transport_mode
        try:
            start = time.time()
            logger.info(MSG_CALLING_ENDPOINT, url, transport.value)
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    url, **build_post_kwargs(request, transport, self._token)
                ) as resp:
                    match resp.status:
                        case status if 200 <= status < 300:
                            pass
                        case status:
                            raise EndpointError(status, await resp.text())
                    payload = json.loads(await resp.text())
            logger.info(MSG_ENDPOINT_OK, time.time() - start)
            return AnalysisResult(
                spoken_text=extract_spoken_text(payload),
                succeeded=True,
                request_id=request.request_id,
            )
        except Exception as exc:
            logger.exception("Analysis request #%d failed", request.request_id)
            return AnalysisResult(
                spoken_text=MSG_ANALYSIS_FAILED,
                succeeded=False,
                request_id=request.request_id,
                error_detail=str(exc) or type(exc).__name__,
            )
